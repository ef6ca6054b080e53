"""
API Dependencies

Dependency injection for the API.
Provides the process-wide file store and runtime configuration.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.store import FileStore

logger = logging.getLogger(__name__)


_store = FileStore()
_runtime_config: RuntimeConfig | None = None


def load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./vault.json
      2. ./.vault.json
      3. ~/.config/vault/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "vault.json",
        Path.cwd() / ".vault.json",
        Path.home() / ".config" / "vault" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_store() -> FileStore:
    """Return the process-wide file store."""
    return _store


def get_runtime_config() -> RuntimeConfig:
    """FastAPI dependency returning the runtime configuration, loaded once per process."""
    global _runtime_config
    if _runtime_config is None:
        _runtime_config = load_runtime_config()
    return _runtime_config
