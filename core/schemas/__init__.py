"""
Schemas

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import boundary
shapes, version constants and the error taxonomy.
"""

# Version constants
from .versioning import (
    LEAF_ENCODING,
    SUPPORTED_TREE_FORMATS,
    TREE_FORMAT,
    TreeFormat,
    UnsupportedLeafEncodingError,
    UnsupportedTreeFormatError,
    assert_supported_leaf_encoding,
    assert_supported_tree_format,
)

# Error models and exceptions
from .errors import (
    CorruptTreeRecordException,
    DuplicateLeafException,
    EmptyInputException,
    ErrorCodes,
    LeafNotFoundException,
    MalformedLeafException,
    RewardsError,
    RewardsException,
    SchemaValidationException,
)

# Boundary records
from .rewards import (
    DistributionRecord,
    OperatorAddress,
    OperatorReward,
    ProofResult,
    RootResult,
    TokenDistribution,
    TokenId,
    TokenTreeRecord,
    TreeRecord,
    TreeRecordList,
    TreeValue,
)


__all__ = [
    # Versioning
    "LEAF_ENCODING",
    "SUPPORTED_TREE_FORMATS",
    "TREE_FORMAT",
    "TreeFormat",
    "UnsupportedLeafEncodingError",
    "UnsupportedTreeFormatError",
    "assert_supported_leaf_encoding",
    "assert_supported_tree_format",
    # Errors
    "CorruptTreeRecordException",
    "DuplicateLeafException",
    "EmptyInputException",
    "ErrorCodes",
    "LeafNotFoundException",
    "MalformedLeafException",
    "RewardsError",
    "RewardsException",
    "SchemaValidationException",
    # Records
    "DistributionRecord",
    "OperatorAddress",
    "OperatorReward",
    "ProofResult",
    "RootResult",
    "TokenDistribution",
    "TokenId",
    "TokenTreeRecord",
    "TreeRecord",
    "TreeRecordList",
    "TreeValue",
]
