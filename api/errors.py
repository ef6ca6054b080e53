"""
API Error Handling

Standardized error handling for the API. Engine and store exceptions are
translated into structured ErrorResponse bodies here.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, VaultException


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.INVALID_REQUEST,
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(APIError):
    """Requested file or proof does not exist."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.NOT_FOUND,
            message=message,
            status_code=404,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.INTERNAL_ERROR,
            message=message,
            status_code=500,
            details=details,
        )


def from_vault_exception(exc: VaultException) -> APIError:
    """Map an engine/store exception to its protocol-level error."""
    details = {"reason": exc.code, **exc.details}
    if exc.code in (ErrorCodes.NO_TREE, ErrorCodes.INDEX_OUT_OF_RANGE):
        return NotFoundError(exc.message, details=details)
    if exc.code == ErrorCodes.EMPTY_INPUT:
        return APIError(
            code=ErrorCodes.EMPTY_INPUT,
            message=exc.message,
            status_code=400,
            details=details,
        )
    return InvalidRequestError(exc.message, details=details)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def vault_error_handler(request: Request, exc: VaultException) -> JSONResponse:
    """Handle engine and store exceptions that reach the app boundary."""
    return await api_error_handler(request, from_vault_exception(exc))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=ErrorCodes.INTERNAL_ERROR,
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
