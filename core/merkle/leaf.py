"""
Leaf Encoding
Canonical encoding and hashing of (address, uint256) reward leaves.

Canonical Leaf Rules (Hard Contracts):
1. Encoding: abi.encode(address, uint256) - 64 bytes, both words
   left-padded to 32 bytes, big-endian
2. Leaf hash: keccak256(keccak256(encoding))
   - The inner hash makes every leaf preimage 32 bytes long, while
     internal nodes hash 64-byte preimages, so a leaf can never be
     presented as an internal node
3. Addresses compare case-insensitively; amounts compare exactly

These rules match StandardMerkleTree from @openzeppelin/merkle-tree and
OpenZeppelin's MerkleProof.sol, so on-chain verifiers recompute identical
hashes.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from eth_abi import encode
from eth_utils import is_hex_address

from core.crypto.hashing import keccak256
from core.schemas.errors import MalformedLeafException
from core.schemas.rewards import OperatorAddress
from core.schemas.versioning import LEAF_ENCODING


UINT256_MAX = 2**256 - 1

# 2**256 - 1 has 78 decimal digits
_MAX_AMOUNT_DIGITS = 78
_DECIMAL_RE = re.compile(r"[0-9]+")


def normalize_address(address: Any) -> OperatorAddress:
    """
    Canonicalize an operator address for lookup: validate and lower-case.

    Only the format is checked (0x + 40 hex chars). EIP-55 checksums are
    not enforced.

    Raises:
        MalformedLeafException: If the address is not a hex address string
    """
    if not isinstance(address, str):
        raise MalformedLeafException(
            f"Address must be a string, got {type(address).__name__}",
            value=address,
        )
    if not address.startswith("0x") or not is_hex_address(address):
        raise MalformedLeafException(f"Invalid address: {address!r}", value=address)
    return OperatorAddress(address.lower())


def parse_amount(amount: Any) -> int:
    """
    Parse a uint256 amount from an int or a base-10 digit string.

    Raises:
        MalformedLeafException: For booleans, floats, signed or non-digit
            strings, negative values and values above 2**256 - 1
    """
    if isinstance(amount, bool):
        raise MalformedLeafException("Amount must be an integer, not a boolean", value=amount)

    if isinstance(amount, int):
        value = amount
    elif isinstance(amount, str):
        if not _DECIMAL_RE.fullmatch(amount):
            raise MalformedLeafException(
                f"Amount must be a non-negative base-10 integer string, got {amount!r}",
                value=amount,
            )
        if len(amount.lstrip("0")) > _MAX_AMOUNT_DIGITS:
            raise MalformedLeafException("Amount exceeds uint256 range", value=amount)
        value = int(amount)
    else:
        raise MalformedLeafException(
            f"Amount must be an int or decimal string, got {type(amount).__name__}",
            value=amount,
        )

    if value < 0:
        raise MalformedLeafException(f"Amount must be non-negative, got {value}", value=amount)
    if value > UINT256_MAX:
        raise MalformedLeafException("Amount exceeds uint256 range", value=amount)
    return value


@dataclass(frozen=True)
class LeafValue:
    """
    A validated (address, amount) leaf tuple.

    Attributes:
        address: Address exactly as supplied by the caller (casing kept)
        amount: Reward amount as an integer in uint256 range
    """
    address: str
    amount: int

    def __post_init__(self) -> None:
        normalize_address(self.address)
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise MalformedLeafException(
                "LeafValue.amount must be an int; use LeafValue.parse() for strings",
                value=self.amount,
            )
        parse_amount(self.amount)

    @classmethod
    def parse(cls, address: Any, amount: Any) -> "LeafValue":
        """Validate raw boundary input (amount as int or decimal string)."""
        normalize_address(address)
        return cls(address=address, amount=parse_amount(amount))

    @classmethod
    def from_list(cls, value: Any) -> "LeafValue":
        """Parse the serialized ``[address, amount]`` form."""
        if not isinstance(value, (list, tuple)) or len(value) != len(LEAF_ENCODING):
            raise MalformedLeafException(
                f"Leaf value must be a list of {len(LEAF_ENCODING)} items",
                value=value,
            )
        return cls.parse(value[0], value[1])

    @property
    def operator(self) -> OperatorAddress:
        return OperatorAddress(self.address.lower())

    @property
    def key(self) -> tuple[str, int]:
        """Lookup key: lower-cased address and exact amount."""
        return (self.address.lower(), self.amount)

    def to_list(self) -> list[str]:
        """Serialized form: ``[address, "amount"]``."""
        return [self.address, str(self.amount)]

    def encode(self) -> bytes:
        return encode(list(LEAF_ENCODING), [self.address.lower(), self.amount])

    def hash(self) -> bytes:
        return hash_leaf(self.encode())


def encode_leaf(address: Any, amount: Any) -> bytes:
    """
    ABI-encode an (address, uint256) tuple.

    Args:
        address: 0x-prefixed hex address (any casing)
        amount: Non-negative integer or base-10 digit string

    Returns:
        64-byte canonical encoding

    Raises:
        MalformedLeafException: If either field is malformed
    """
    return LeafValue.parse(address, amount).encode()


def hash_leaf(encoded: bytes) -> bytes:
    """
    Hash an encoded leaf: keccak256(keccak256(encoded)).

    Args:
        encoded: Output of encode_leaf()

    Returns:
        32-byte leaf hash
    """
    return keccak256(keccak256(encoded))


def leaf_hash(address: Any, amount: Any) -> bytes:
    """Encode and hash an (address, amount) tuple in one step."""
    return hash_leaf(encode_leaf(address, amount))


__all__ = [
    "UINT256_MAX",
    "LeafValue",
    "normalize_address",
    "parse_amount",
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
]
