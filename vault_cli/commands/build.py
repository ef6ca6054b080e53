"""
CLI Build Command

Build the Merkle tree of a directory offline, without talking to the
server. Useful to precompute the trust anchor or to audit an upload.

Usage:
    vault build --files-dir ./sample/files --tree-out tree.json [--root-hash-out PATH]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from core.merkle import build_merkle_tree
from core.schemas.errors import EmptyInputError
from vault_cli.storage import read_files_from_dir, save_root_hash, save_tree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def build_cmd(args: Namespace) -> int:
    """Execute the build command."""
    try:
        files = read_files_from_dir(args.files_dir)
        tree = build_merkle_tree(files)
    except OSError as e:
        print(f"Error reading files: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except EmptyInputError:
        print(f"Error: No files found in {args.files_dir}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    save_tree(args.tree_out, tree)
    if args.root_hash_out:
        save_root_hash(args.root_hash_out, tree.root_hash)

    print(f"root_hash: {tree.root_hash}")
    print(f"file_count: {tree.leaf_count}")
    print(f"depth: {tree.depth}")
    print(f"tree_path: {args.tree_out}")
    return EXIT_SUCCESS
