"""
CLI Proof Command

Fetch the Merkle proof of one file and save it as JSON.

Usage:
    vault proof --index 0 --out ./proofs/
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from vault_cli.client import VaultClientError, create_client
from vault_cli.storage import resolve_output_path, save_proof


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def proof_cmd(args: Namespace) -> int:
    """Execute the proof command."""
    out_path = resolve_output_path(args.out, f"proof_file{args.index}.json")

    try:
        with create_client(args.cli_config, args.server) as client:
            proofs = client.get_proof(args.index)
    except VaultClientError as e:
        print(f"Error fetching proof for file {args.index}: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    save_proof(out_path, proofs)
    logger.info(f"Saved proof for file {args.index} to {out_path}")
    print(f"Merkle proof for file {args.index} saved to {out_path}")
    return EXIT_SUCCESS
