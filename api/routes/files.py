"""
File Routes

Upload a batch of files and download individual files by index.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from api.deps import get_runtime_config, get_store
from api.errors import InvalidRequestError, from_vault_exception
from api.models.responses import UploadResponse
from core.config.runtime import RuntimeConfig
from core.schemas.errors import VaultException
from core.store import FileStore


logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    files: Optional[list[UploadFile]] = File(default=None, description="Ordered batch of files"),
    store: FileStore = Depends(get_store),
    config: RuntimeConfig = Depends(get_runtime_config),
) -> UploadResponse:
    """
    Upload an ordered batch of files.

    Replaces any previously stored batch and returns the Merkle root hash
    of the new one. File order in the request is the leaf order.
    """
    files = files or []
    if len(files) > config.server.max_upload_files:
        raise InvalidRequestError(
            f"Too many files: {len(files)} (limit {config.server.max_upload_files})",
            details={"file_count": len(files), "limit": config.server.max_upload_files},
        )

    contents = [await f.read() for f in files]

    try:
        root_hash = store.upload(contents)
    except VaultException as e:
        raise from_vault_exception(e)

    logger.info(f"Upload of {len(contents)} files complete, root hash {root_hash}")
    return UploadResponse(ok=True, root_hash=root_hash, file_count=len(contents))


@router.get(
    "/files/{index}",
    response_class=Response,
    responses={200: {"content": {"application/octet-stream": {}}}},
)
async def download_file(
    index: int,
    store: FileStore = Depends(get_store),
) -> Response:
    """
    Download the file at the given index of the stored batch.
    """
    try:
        content = store.download(index)
    except VaultException as e:
        raise from_vault_exception(e)

    logger.info(f"Serving file {index} ({len(content)} bytes)")
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="file{index}"'},
    )
