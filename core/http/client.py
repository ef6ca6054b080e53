"""
HTTP Client

Provides a small synchronous HTTP client used to talk to the file vault
service.
"""

from __future__ import annotations

import json as jsonlib
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse response as JSON."""
        return jsonlib.loads(self.content)


class HttpError(Exception):
    """Raised when a request fails before any response arrives."""


class HttpClient:
    """
    Thin wrapper over a requests session.

    Usage:
        client = HttpClient(timeout=10)

        response = client.request("GET", "http://localhost:8000/health")
        if response.ok:
            data = response.json()
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        default_headers: Optional[dict[str, str]] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            default_headers: Headers to include in all requests
        """
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Lazily create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        data: Optional[Any] = None,
        json: Optional[Any] = None,
        files: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            headers: Additional headers
            params: Query parameters
            data: Request body (form data)
            json: Request body (JSON)
            files: Multipart file fields, as accepted by requests
            timeout: Request timeout

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            HttpError: On connection errors and timeouts
        """
        session = self._get_session()
        effective_timeout = timeout or self.timeout

        logger.debug(f"{method} {url}")
        try:
            response = session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                data=data,
                json=json,
                files=files,
                timeout=effective_timeout,
            )
        except requests.RequestException as e:
            raise HttpError(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
