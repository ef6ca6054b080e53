"""
Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy across the Merkle engine, blob store,
HTTP service and CLI. Defines both a Pydantic model for structured error
communication and Python exceptions for control flow.

Every engine failure is local, deterministic and non-retryable.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Merkle engine
    EMPTY_INPUT = "EMPTY_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    NO_TREE = "NO_TREE"
    MALFORMED_PROOF = "MALFORMED_PROOF"
    MALFORMED_TREE = "MALFORMED_TREE"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Service boundary
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class VaultError(BaseModel):
    """
    Error model for structured error communication.

    Used when an error crosses a serialization boundary (HTTP bodies,
    CLI JSON output) instead of being raised.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_RANGE],
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


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class VaultException(Exception):
    """
    Base exception for all Merkle vault errors.

    Carries a stable error code plus structured details.
    """

    def __init__(
        self,
        message: str,
        code: str = "VAULT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(VaultException):
    """Raised when a tree is built from zero leaves."""

    def __init__(self, message: str = "empty file list") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_INPUT)


class IndexOutOfRangeError(VaultException, IndexError):
    """Raised when a leaf index is outside [0, n-1]."""

    def __init__(self, index: Any, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "leaf_count": leaf_count},
        )
        self.index = index
        self.leaf_count = leaf_count


class NoTreeError(VaultException):
    """Raised when an operation needs a tree but none has been built."""

    def __init__(self, message: str = "no Merkle tree has been built") -> None:
        super().__init__(message=message, code=ErrorCodes.NO_TREE)


class MalformedProofError(VaultException):
    """Raised when a proof's sibling ranges do not line up with the leaf."""

    def __init__(
        self,
        message: str,
        step: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if step is not None:
            full_details["step"] = step
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
        )


class MalformedTreeError(VaultException):
    """Raised when a serialized tree violates the node invariants."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_TREE,
            details=details,
        )


class RootMismatchError(VaultException):
    """Raised when a persisted tree does not match the persisted root hash."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            message="merkle root hash mismatch",
            code=ErrorCodes.ROOT_MISMATCH,
            details={"expected": expected, "actual": actual},
        )


__all__ = [
    "ErrorCodes",
    "VaultError",
    "VaultException",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "NoTreeError",
    "MalformedProofError",
    "MalformedTreeError",
    "RootMismatchError",
]
