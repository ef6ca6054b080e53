"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import get_runtime_config
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    vault_error_handler,
)
from api.routes import health, files, proofs
from core.schemas.errors import VaultException


def _resolve_log_level(raw: str | None) -> int:
    """Resolve a log level name, defaulting to INFO."""
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(get_runtime_config().server.log_level),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Vault API",
        description="""
HTTP API for storing a batch of files and serving them back with Merkle
proofs, so clients can check every download against a root hash they kept.

## Endpoints

- **POST /upload** - Upload an ordered batch of files, returns the root hash
- **GET /files/{index}** - Download a file by index
- **GET /proofs/{index}** - Merkle proof (sibling chain) for a file
- **GET /health** - Health check
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(VaultException, vault_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(files.router)
    app.include_router(proofs.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    server_config = get_runtime_config().server
    uvicorn.run(app, host=server_config.host, port=server_config.port)
