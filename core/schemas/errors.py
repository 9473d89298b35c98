"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for Merkle Sum Tree construction,
insertion, proof handling and entry ingestion.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Verification failure is deliberately absent: verify_proof returns False.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction & Validation Errors
    CONSTRUCTION_ERROR = "CONSTRUCTION_ERROR"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Tree State Errors
    TREE_FULL = "TREE_FULL"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Proof Errors
    PROOF_FORMAT_INVALID = "PROOF_FORMAT_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class SumTreeError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to be reported (e.g. in CLI JSON output)
    rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CONSTRUCTION_ERROR],
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

    def to_exception(self) -> "SumTreeException":
        """Convert this error model to a raised exception."""
        return SumTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SumTreeException(Exception):
    """
    Base exception for all Merkle Sum Tree errors.

    This exception carries structured error information and can be
    converted to/from SumTreeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUM_TREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SumTreeError:
        """Convert this exception to a SumTreeError model."""
        return SumTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConstructionException(SumTreeException):
    """Raised when a tree, entry or hash function cannot be constructed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: str = ErrorCodes.CONSTRUCTION_ERROR,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class MalformedRecordException(ConstructionException):
    """Raised when an entry source record has the wrong shape or type."""

    def __init__(
        self,
        message: str,
        row: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if row is not None:
            full_details["row"] = row
        super().__init__(
            message=message,
            details=full_details,
            code=ErrorCodes.MALFORMED_RECORD,
        )


class TreeCapacityException(SumTreeException):
    """Raised when inserting into an incremental tree that is already full."""

    def __init__(
        self,
        message: str = "The tree is full",
        capacity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if capacity is not None:
            full_details["capacity"] = capacity
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_FULL,
            details=full_details,
            retryable=False,
        )


class LeafNotFoundException(SumTreeException):
    """Raised when a proof is requested for a leaf that does not exist."""

    def __init__(
        self,
        message: str = "The leaf does not exist in this tree",
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class ProofFormatException(SumTreeException):
    """Raised when a serialized proof does not have the MerkleProof shape."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_FORMAT_INVALID,
            details=details,
            retryable=False,
        )


class CanonicalizationException(SumTreeException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )
