"""
Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for Merkle tree construction, proof
generation and verification. Defines both Pydantic models for structured
error reporting and Python exceptions for control flow.

Every failure in this package is a caller-supplied precondition violation,
reported synchronously. Nothing here is retryable.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree shape & lifecycle
    LEAF_INDEX_OUT_OF_BOUNDS = "LEAF_INDEX_OUT_OF_BOUNDS"
    ROOT_NOT_COMPUTED = "ROOT_NOT_COMPUTED"
    TREE_FINALIZED = "TREE_FINALIZED"

    # Hashing
    UNSUPPORTED_HASH_ALGORITHM = "UNSUPPORTED_HASH_ALGORITHM"

    # Configuration
    INVALID_CONFIG = "INVALID_CONFIG"

    # Verification
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Structured error model.

    Used when an error has to be reported rather than raised, e.g. in the
    CLI's JSON output.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.LEAF_INDEX_OUT_OF_BOUNDS],
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

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raised exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all merkle_arena errors.

    Carries structured error information and can be converted to a
    MerkleError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class LeafIndexOutOfBoundsException(MerkleException, IndexError):
    """Raised when inserting into a full tree or addressing a leaf past the end."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        leaf_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        if leaf_count is not None:
            full_details["leaf_count"] = leaf_count
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_INDEX_OUT_OF_BOUNDS,
            details=full_details,
            retryable=False,
        )


class RootNotComputedException(MerkleException):
    """Raised when an opening is requested before the interior levels exist."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_NOT_COMPUTED,
            details=details,
            retryable=False,
        )


class TreeFinalizedException(MerkleException):
    """Raised when a tree is mutated after its root was computed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_FINALIZED,
            details=details,
            retryable=False,
        )


class UnsupportedHashAlgorithmException(MerkleException, ValueError):
    """Raised when a hash algorithm name is not recognised."""

    def __init__(
        self,
        message: str,
        algorithm: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if algorithm:
            full_details["algorithm"] = algorithm
        super().__init__(
            message=message,
            code=ErrorCodes.UNSUPPORTED_HASH_ALGORITHM,
            details=full_details,
            retryable=False,
        )


class ConfigurationException(MerkleException, ValueError):
    """Raised when configuration values are invalid."""

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
            code=ErrorCodes.INVALID_CONFIG,
            details=full_details,
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "LeafIndexOutOfBoundsException",
    "RootNotComputedException",
    "TreeFinalizedException",
    "UnsupportedHashAlgorithmException",
    "ConfigurationException",
]
