"""
Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

This module provides:
- Keccak-256 hashing for raw bytes (Ethereum flavour, not NIST SHA3-256)
- Hex encoding/decoding with 0x prefix
- Fixed-width (bytes32) hex validation

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Hex output is always lowercase with a 0x prefix
- All operations are deterministic
"""
from __future__ import annotations

import re

from eth_utils import keccak


HASH_LENGTH = 32

_BYTES32_HEX_RE = re.compile(r"0x[0-9a-fA-F]{64}")
_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]*")


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not isinstance(hex_string, str):
        raise ValueError(f"Hex value must be a string, got {type(hex_string).__name__}")

    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    # bytes.fromhex skips whitespace
    if not _HEX_DIGITS_RE.fullmatch(hex_content):
        raise ValueError(f"Invalid hex characters in string: {hex_string!r}")

    return bytes.fromhex(hex_content)


def is_bytes32_hex(value: object) -> bool:
    """Check whether a value is a 0x-prefixed 32-byte hex string."""
    return isinstance(value, str) and _BYTES32_HEX_RE.fullmatch(value) is not None


def bytes32_from_hex(hex_string: str) -> bytes:
    """
    Decode a 0x-prefixed hex string that must hold exactly 32 bytes.

    Raises:
        ValueError: If the string is not a valid bytes32 hex value
    """
    if not is_bytes32_hex(hex_string):
        raise ValueError(f"Expected a 0x-prefixed 32-byte hex string, got: {hex_string!r}")
    return bytes.fromhex(hex_string[2:])


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "to_hex",
    "from_hex",
    "is_bytes32_hex",
    "bytes32_from_hex",
]
