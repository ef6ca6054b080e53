"""
CLI Upload Command

Upload every file of a directory as one ordered batch and persist the
returned root hash as the client's trust anchor. Optionally builds the tree
locally and keeps a copy of it too.

Usage:
    vault upload --files-dir ./sample/files [--root-hash-out PATH] [--tree-out PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.merkle import build_merkle_tree
from vault_cli.client import VaultClientError, create_client
from vault_cli.storage import read_files_from_dir, save_root_hash, save_tree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

DEFAULT_ROOT_HASH_PATH = "merkle_root_hash.txt"


@dataclass
class UploadSummary:
    """Summary of an upload for CLI output."""
    files_dir: str = ""
    file_count: int = 0
    root_hash: str = ""
    root_hash_path: str = ""
    tree_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["tree_path"] is None:
            del d["tree_path"]
        return d


def print_summary_human(summary: UploadSummary) -> None:
    print(f"files_dir: {summary.files_dir}")
    print(f"file_count: {summary.file_count}")
    print(f"root_hash: {summary.root_hash}")
    print(f"root_hash_path: {summary.root_hash_path}")
    if summary.tree_path:
        print(f"tree_path: {summary.tree_path}")


def upload_cmd(args: Namespace) -> int:
    """
    Execute the upload command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    root_hash_path = args.root_hash_out or config.root_hash_path or DEFAULT_ROOT_HASH_PATH
    tree_path = args.tree_out or config.tree_path

    try:
        files = read_files_from_dir(args.files_dir)
    except OSError as e:
        print(f"Error reading files: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not files:
        print(f"Error: No files found in {args.files_dir}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        with create_client(config, args.server) as client:
            result = client.upload(files)
    except VaultClientError as e:
        print(f"Error uploading files: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if tree_path:
        tree = build_merkle_tree(files)
        if tree.root_hash != result.root_hash:
            print(
                f"Error: server root hash {result.root_hash} does not match "
                f"local root hash {tree.root_hash}",
                file=sys.stderr,
            )
            return EXIT_RUNTIME_ERROR
        save_tree(tree_path, tree)
        logger.info(f"Saved Merkle tree to {tree_path}")

    save_root_hash(root_hash_path, result.root_hash)
    logger.info(f"Saved root hash to {root_hash_path}")

    summary = UploadSummary(
        files_dir=str(args.files_dir),
        file_count=result.file_count,
        root_hash=result.root_hash,
        root_hash_path=str(root_hash_path),
        tree_path=str(tree_path) if tree_path else None,
    )
    if args.json or config.default_output_format == "json":
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
