"""
CLI command modules.
"""

from vault_cli.commands import build, download, proof, upload, verify

__all__ = ["build", "download", "proof", "upload", "verify"]
