"""
Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.models.responses import HealthResponse
from core.store import FileStore


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: FileStore = Depends(get_store)) -> HealthResponse:
    """
    Health check endpoint.

    Returns service status and the size of the stored batch.
    """
    return HealthResponse(
        ok=True,
        service="merkle-vault-api",
        version="v1",
        file_count=store.file_count,
    )


@router.get("/", response_model=HealthResponse)
async def root(store: FileStore = Depends(get_store)) -> HealthResponse:
    """
    Root endpoint - same as health check.
    """
    return await health_check(store)
