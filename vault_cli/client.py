"""
Vault Client

Client for the file vault HTTP service plus the offline verification step.

The server is untrusted: nothing it returns is accepted until
verify_file() has checked it against a root hash the client kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from core.crypto.hashing import is_digest_hex
from core.http import HttpClient, HttpError, HttpResponse
from core.merkle import MerkleTree, MerkleVerifier, ProofNode, proofs_from_dicts
from core.schemas.errors import MalformedProofError, VaultError
from vault_cli.config import CLIConfig


logger = logging.getLogger(__name__)


class VaultClientError(Exception):
    """Error returned by, or while talking to, the vault service."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}


@dataclass
class UploadResult:
    root_hash: str
    file_count: int


@dataclass
class VerifyResult:
    ok: bool
    message: str


def normalize_server_url(server_url: str) -> str:
    """Prepend http:// to bare host:port addresses and drop trailing slashes."""
    url = server_url.strip()
    if "://" not in url:
        url = f"http://{url}"
    return url.rstrip("/")


class VaultClient:
    """
    Client for the vault service.

    Usage:
        client = VaultClient("localhost:8000")
        result = client.upload([b"a", b"b"])
        data = client.download(0)
        proof = client.get_proof(0)
    """

    def __init__(
        self,
        server_url: str,
        *,
        timeout: float = 30.0,
        http: Optional[HttpClient] = None,
    ) -> None:
        self.base_url = normalize_server_url(server_url)
        self.http = http or HttpClient(timeout=timeout)
        logger.debug(f"Vault client using server {self.base_url}")

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _check(self, response: HttpResponse) -> HttpResponse:
        if response.ok:
            return response

        try:
            error = VaultError.model_validate(response.json()["error"])
        except (ValueError, KeyError, TypeError):
            raise VaultClientError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )

        raise VaultClientError(
            error.message,
            status_code=response.status_code,
            code=error.code,
            details=error.details,
        )

    def _send(self, method: str, path: str, **kwargs: Any) -> HttpResponse:
        try:
            response = self.http.request(method, self._url(path), **kwargs)
        except HttpError as e:
            raise VaultClientError(f"Request to {self._url(path)} failed: {e}") from e
        return self._check(response)

    def _json(self, response: HttpResponse) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise VaultClientError(
                "Server returned an invalid response", status_code=response.status_code
            ) from e
        if not isinstance(body, dict):
            raise VaultClientError(
                "Server returned an invalid response", status_code=response.status_code
            )
        return body

    def health(self) -> dict[str, Any]:
        return self._json(self._send("GET", "/health"))

    def upload(self, files: Sequence[bytes]) -> UploadResult:
        """
        Upload an ordered batch of files.

        Returns:
            UploadResult with the root hash the client must keep

        Raises:
            VaultClientError: On transport errors or a rejected batch
        """
        parts = [
            ("files", (f"file{i}", content, "application/octet-stream"))
            for i, content in enumerate(files)
        ]
        body = self._json(self._send("POST", "/upload", files=parts))

        root_hash = body.get("root_hash", "")
        if not is_digest_hex(root_hash):
            raise VaultClientError(f"Server returned an invalid root hash: {root_hash!r}")

        logger.info(f"Uploaded {len(parts)} files, root hash {root_hash}")
        return UploadResult(
            root_hash=root_hash,
            file_count=body.get("file_count", len(parts)),
        )

    def download(self, index: int) -> bytes:
        """
        Download the file at index.

        Raises:
            VaultClientError: With code NOT_FOUND for unknown indices
        """
        content = self._send("GET", f"/files/{index}").content
        logger.info(f"Downloaded file {index} ({len(content)} bytes)")
        return content

    def get_proof(self, index: int) -> list[ProofNode]:
        """
        Fetch the Merkle proof for the file at index.

        Raises:
            VaultClientError: With code NOT_FOUND for unknown indices, or
                when the server sends a proof that cannot be parsed
        """
        body = self._json(self._send("GET", f"/proofs/{index}"))
        try:
            proofs = proofs_from_dicts(body.get("proofs"))
        except MalformedProofError as e:
            raise VaultClientError(f"Server returned a malformed proof: {e.message}") from e
        logger.info(f"Fetched Merkle proof for file {index} ({len(proofs)} siblings)")
        return proofs

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "VaultClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def verify_file(
    blob: bytes,
    index: int,
    proofs: Sequence[ProofNode],
    root_hash: str,
    tree: Optional[MerkleTree] = None,
) -> VerifyResult:
    """
    Check a downloaded file against the trusted root hash.

    Runs entirely on the client. A malformed proof is reported exactly like
    a hash mismatch.

    Args:
        blob: Downloaded file contents
        index: Index the file was downloaded from
        proofs: Proof fetched for that index
        root_hash: Root hash persisted at upload time
        tree: Locally persisted tree, if the client kept one
    """
    ok = MerkleVerifier.verify_with_tree(blob, index, proofs, root_hash, tree)
    if ok:
        message = f"File {index} verification successful"
    else:
        message = f"File {index} verification failed, do not trust this file"
    return VerifyResult(ok=ok, message=message)


def create_client(config: CLIConfig, server_url: Optional[str] = None) -> VaultClient:
    """Create a VaultClient for an explicit server, or the configured one."""
    return VaultClient(server_url or config.server_url, timeout=config.timeout)
