"""API response models."""

from api.models.responses import (
    HealthResponse,
    UploadResponse,
    ProofNodeModel,
    ProofResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "HealthResponse",
    "UploadResponse",
    "ProofNodeModel",
    "ProofResponse",
    "ErrorDetail",
    "ErrorResponse",
]
