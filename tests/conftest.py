"""
Pytest configuration and shared fixtures for Merkle vault tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_vault = importlib.import_module("fixtures.vault_fixtures")

make_files = _vault.make_files
write_files = _vault.write_files
AppTransport = _vault.AppTransport


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep VAULT_* variables from the developer's shell out of the tests."""
    for name in [
        "VAULT_SERVER_URL", "SERVER_ADDRESS", "VAULT_HOST", "VAULT_PORT",
        "VAULT_TIMEOUT", "VAULT_LOG_LEVEL", "VAULT_LOG_FILE",
        "VAULT_MAX_UPLOAD_FILES", "VAULT_ROOT_HASH_PATH", "VAULT_TREE_PATH",
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_files():
    """Provide a batch of five distinct files."""
    return make_files(5)


@pytest.fixture
def store():
    """Provide an empty FileStore."""
    from core.store import FileStore
    return FileStore()


@pytest.fixture
def api_client(store):
    """Provide a TestClient whose app uses the per-test store."""
    from fastapi.testclient import TestClient

    from api.app import app
    from api.deps import get_store

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def app_transport(api_client, monkeypatch):
    """Route every VaultClient created without an explicit transport to the app."""
    transport = AppTransport(api_client)
    monkeypatch.setattr("vault_cli.client.HttpClient", lambda **kwargs: transport)
    return transport


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
