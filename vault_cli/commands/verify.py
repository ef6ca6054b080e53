"""
CLI Verify Command

Verify a downloaded file offline against the trusted root hash:
- Recompute the root from the file and its proof
- If a local tree is available, also check the leaf and the root against it

A malformed proof is reported as a failed verification, never as a crash.

Usage:
    vault verify --file file0.bin --index 0 --proof proof_file0.json \
        --root-hash merkle_root_hash.txt [--tree tree.json] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from core.merkle import MerkleTree
from core.schemas.errors import MalformedProofError, MalformedTreeError
from vault_cli.client import verify_file
from vault_cli.storage import load_proof, load_root_hash, load_tree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of file verification for CLI output."""
    file_path: str = ""
    file_index: int = 0
    root_hash: str = ""
    proof_length: int = 0
    used_tree: bool = False
    ok: bool = False
    message: str = ""
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"file: {summary.file_path}")
    print(f"index: {summary.file_index}")
    print(f"root_hash: {summary.root_hash}")
    print(f"proof_length: {summary.proof_length}")
    print(f"used_tree: {str(summary.used_tree).lower()}")
    print(f"ok: {str(summary.ok).lower()}")
    print(summary.message)

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 when the file must not be trusted)
    """
    config = args.cli_config
    root_hash_path = args.root_hash or config.root_hash_path
    tree_path = args.tree or config.tree_path

    if not root_hash_path:
        print("Error: No root hash given (--root-hash or root_hash_path in config)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        blob = Path(args.file).read_bytes()
        root_hash = load_root_hash(root_hash_path)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(
        file_path=str(args.file),
        file_index=args.index,
        root_hash=root_hash,
    )

    tree: MerkleTree | None = None
    if tree_path and Path(tree_path).exists():
        try:
            tree = load_tree(tree_path)
        except MalformedTreeError as e:
            print(f"Error loading tree {tree_path}: {e.message}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        summary.used_tree = True
    elif args.tree:
        print(f"Error: Tree file not found: {args.tree}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proofs = load_proof(args.proof)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MalformedProofError as e:
        summary.errors.append(f"Proof: {e.message}")
        summary.message = f"File {args.index} verification failed, do not trust this file"
        proofs = None

    if proofs is not None:
        summary.proof_length = len(proofs)
        result = verify_file(blob, args.index, proofs, root_hash, tree)
        summary.ok = result.ok
        summary.message = result.message

    if args.json or config.default_output_format == "json":
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
