"""
CLI Download Command

Download one file of the stored batch by index.

Usage:
    vault download --index 0 --out ./downloads/
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from vault_cli.client import VaultClientError, create_client
from vault_cli.storage import resolve_output_path, write_file


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def download_cmd(args: Namespace) -> int:
    """Execute the download command."""
    out_path = resolve_output_path(args.out, f"file{args.index}.bin")

    try:
        with create_client(args.cli_config, args.server) as client:
            content = client.download(args.index)
    except VaultClientError as e:
        print(f"Error downloading file {args.index}: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    write_file(out_path, content)
    logger.info(f"Saved file {args.index} to {out_path}")
    print(f"File {args.index} downloaded successfully and saved to {out_path}")
    return EXIT_SUCCESS
