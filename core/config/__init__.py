"""
Runtime Configuration Module

Provides configuration loading and management for the file vault.
"""

from .runtime import (
    DEFAULT_SERVER_URL,
    RuntimeConfig,
    ServerConfig,
)

__all__ = [
    "DEFAULT_SERVER_URL",
    "RuntimeConfig",
    "ServerConfig",
]
