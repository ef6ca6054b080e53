"""
CLI Configuration

Configuration management for the vault CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.config.runtime import DEFAULT_SERVER_URL


# Environment variable prefix
ENV_PREFIX = "VAULT_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Server
    server_url: str = DEFAULT_SERVER_URL
    timeout: float = 30.0

    # Trust anchor defaults
    root_hash_path: str | None = None
    tree_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _server_url_from_env() -> str | None:
    return os.getenv(f"{ENV_PREFIX}SERVER_URL") or os.getenv("SERVER_ADDRESS")


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()

    server_url = _server_url_from_env()
    if server_url:
        config.server_url = server_url
    if os.getenv(f"{ENV_PREFIX}TIMEOUT"):
        config.timeout = float(os.getenv(f"{ENV_PREFIX}TIMEOUT", "30"))

    config.root_hash_path = os.getenv(f"{ENV_PREFIX}ROOT_HASH_PATH")
    config.tree_path = os.getenv(f"{ENV_PREFIX}TREE_PATH")

    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    config.server_url = data.get("server_url", config.server_url)
    config.timeout = float(data.get("timeout", config.timeout))

    config.root_hash_path = data.get("root_hash_path", config.root_hash_path)
    config.tree_path = data.get("tree_path", config.tree_path)

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    config.default_output_format = data.get(
        "default_output_format", config.default_output_format
    )

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "vault.json",
            Path.cwd() / ".vault.json",
            Path.home() / ".config" / "vault" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    env_config = load_config_from_env()

    # Merge env into config (env takes precedence)
    if _server_url_from_env():
        config.server_url = env_config.server_url
    if os.getenv(f"{ENV_PREFIX}TIMEOUT"):
        config.timeout = env_config.timeout
    if os.getenv(f"{ENV_PREFIX}ROOT_HASH_PATH"):
        config.root_hash_path = env_config.root_hash_path
    if os.getenv(f"{ENV_PREFIX}TREE_PATH"):
        config.tree_path = env_config.tree_path
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "server_url": "http://127.0.0.1:8000",
  "timeout": 30,
  "root_hash_path": "./sample/merkle_root_hash.txt",
  "tree_path": "./sample/merkle_tree.json",
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
