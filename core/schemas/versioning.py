"""
Schemas
File: versioning.py

Purpose: Centralize tree format and leaf encoding constants.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Serialized tree format (compatible with @openzeppelin/merkle-tree dumps)
TREE_FORMAT: str = "standard-v1"

# ABI types of a leaf tuple: (operator, reward)
LEAF_ENCODING: tuple[str, ...] = ("address", "uint256")

# Type alias for tree format (future-proof for migrations)
TreeFormat = Literal["standard-v1"]

SUPPORTED_TREE_FORMATS: frozenset[str] = frozenset({"standard-v1"})


class UnsupportedTreeFormatError(ValueError):
    """Raised when an unsupported tree format is encountered."""

    def __init__(self, version: object, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_TREE_FORMATS
        super().__init__(
            f"Unsupported tree format: {version!r}. "
            f"Supported formats: {sorted(self.supported)}"
        )


class UnsupportedLeafEncodingError(ValueError):
    """Raised when a record declares a leaf encoding other than LEAF_ENCODING."""

    def __init__(self, encoding: object) -> None:
        self.encoding = encoding
        super().__init__(
            f"Unsupported leaf encoding: {encoding!r}. "
            f"Expected: {list(LEAF_ENCODING)}"
        )


def assert_supported_tree_format(version: object) -> None:
    """
    Validate that the given tree format is supported.

    Raises:
        UnsupportedTreeFormatError: If the format is not supported.
    """
    if version not in SUPPORTED_TREE_FORMATS:
        raise UnsupportedTreeFormatError(version)


def assert_supported_leaf_encoding(encoding: object) -> None:
    """
    Validate that the given leaf encoding matches LEAF_ENCODING.

    Raises:
        UnsupportedLeafEncodingError: If the encoding differs.
    """
    if not isinstance(encoding, (list, tuple)) or tuple(encoding) != LEAF_ENCODING:
        raise UnsupportedLeafEncodingError(encoding)

