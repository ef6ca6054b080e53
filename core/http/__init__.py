"""
HTTP Client Module

Synchronous HTTP client used by the vault CLI.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
