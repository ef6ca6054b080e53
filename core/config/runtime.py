"""
Runtime Configuration

Central configuration for the file vault service.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

load_dotenv()


DEFAULT_SERVER_URL = "http://127.0.0.1:8000"


@dataclass
class ServerConfig:
    """Configuration for the HTTP service."""
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    max_upload_files: int = 10_000


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - A dictionary (e.g. parsed JSON config)
    - Environment variables (and a .env file), overlaid on top
    - Programmatic construction

    Client-side settings live in vault_cli.config.CLIConfig.
    """
    server: ServerConfig = field(default_factory=ServerConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - VAULT_HOST / VAULT_PORT: Address the service binds to
        - VAULT_LOG_LEVEL: Log level for the service
        - VAULT_MAX_UPLOAD_FILES: Largest accepted upload batch
        """
        overrides: dict[str, Any] = {}

        if os.getenv("VAULT_HOST"):
            overrides["host"] = os.getenv("VAULT_HOST")
        if os.getenv("VAULT_PORT"):
            overrides["port"] = int(os.getenv("VAULT_PORT"))
        if os.getenv("VAULT_LOG_LEVEL"):
            overrides["log_level"] = os.getenv("VAULT_LOG_LEVEL")
        if os.getenv("VAULT_MAX_UPLOAD_FILES"):
            overrides["max_upload_files"] = int(os.getenv("VAULT_MAX_UPLOAD_FILES"))

        return overrides

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        server_data = data.get("server", {})
        server = ServerConfig(**server_data) if server_data else ServerConfig()
        return cls(server=server)

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.items():
            setattr(new_config.server, key, value)
        return new_config

