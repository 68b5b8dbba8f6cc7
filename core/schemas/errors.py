"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the rewards Merkle engine.
Defines both Pydantic models for structured error reporting (one per
failed token group) and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"

    # Leaf & Tree Construction Errors
    MALFORMED_LEAF = "MALFORMED_LEAF"
    EMPTY_INPUT = "EMPTY_INPUT"
    DUPLICATE_LEAF = "DUPLICATE_LEAF"
    DUPLICATE_TOKEN = "DUPLICATE_TOKEN"

    # Lookup Errors
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Serialization Errors
    CORRUPT_TREE_RECORD = "CORRUPT_TREE_RECORD"

    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class RewardsError(BaseModel):
    """
    Base error model for structured error communication.

    Used to report per-token failures without raising, so one bad token
    group never aborts a whole batch.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_LEAF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "RewardsException":
        """Convert this error model to a raised exception."""
        return RewardsException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class RewardsException(Exception):
    """
    Base exception for all rewards engine errors.

    This exception carries structured error information and can be
    converted to/from RewardsError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "REWARDS_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> RewardsError:
        """Convert this exception to a RewardsError model."""
        return RewardsError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class SchemaValidationException(RewardsException):
    """Exception raised when a boundary record fails schema validation."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
        )


class MalformedLeafException(RewardsException):
    """Exception raised when an (address, amount) tuple cannot be encoded."""

    def __init__(
        self,
        message: str,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if value is not None:
            full_details["value"] = repr(value)
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_LEAF,
            details=full_details,
        )


class EmptyInputException(RewardsException):
    """Exception raised when a tree is requested over zero leaves."""

    def __init__(
        self,
        message: str = "Expected at least one leaf",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
        )


class DuplicateLeafException(RewardsException):
    """Exception raised when two tuples encode to the same leaf."""

    def __init__(
        self,
        message: str,
        leaf_hash: str | None = None,
        indices: tuple[int, int] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_hash:
            full_details["leaf_hash"] = leaf_hash
        if indices is not None:
            full_details["indices"] = list(indices)
        super().__init__(
            message=message,
            code=ErrorCodes.DUPLICATE_LEAF,
            details=full_details,
        )


class LeafNotFoundException(RewardsException):
    """
    Raised when a proof is requested for a tuple that is not in the tree.

    This is a normal "not a member" outcome; batch callers catch it and
    move on to the next token.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=details,
        )


class CorruptTreeRecordException(RewardsException):
    """Exception raised when a serialized tree fails self-consistency checks."""

    def __init__(
        self,
        message: str,
        check_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if check_id:
            full_details["check_id"] = check_id
        super().__init__(
            message=message,
            code=ErrorCodes.CORRUPT_TREE_RECORD,
            details=full_details,
        )
