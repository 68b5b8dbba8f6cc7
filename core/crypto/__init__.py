"""
Core cryptographic utilities.

Keccak-256 hashing and hex helpers shared by the Merkle engine.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    to_hex,
    from_hex,
    is_bytes32_hex,
    bytes32_from_hex,
)

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "to_hex",
    "from_hex",
    "is_bytes32_hex",
    "bytes32_from_hex",
]
