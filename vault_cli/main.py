"""
Vault CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    vault upload --files-dir DIR [--root-hash-out PATH] [--tree-out PATH] [--json]
    vault download --index I --out PATH
    vault proof --index I --out PATH
    vault build --files-dir DIR --tree-out PATH [--root-hash-out PATH]
    vault verify --file PATH --index I --proof PATH --root-hash PATH [--tree PATH] [--json]
    vault config --init

Environment Variables:
    VAULT_SERVER_URL        Server address (falls back to SERVER_ADDRESS)
    VAULT_TIMEOUT           Request timeout in seconds (default: 30)
    VAULT_ROOT_HASH_PATH    Default root hash file
    VAULT_TREE_PATH         Default local tree file
    VAULT_LOG_LEVEL         Log level (default: INFO)
    VAULT_LOG_FILE          Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from vault_cli.commands import build, download, proof, upload, verify
from vault_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="vault",
        description="Merkle Vault CLI - Upload files, fetch them back, and verify them against a root hash.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./vault.json or ~/.config/vault/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--server", "-s",
        type=str,
        default=None,
        help="Server address, e.g. localhost:8000 (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- upload command ---
    upload_parser = subparsers.add_parser(
        "upload",
        help="Upload a directory of files as one batch",
        description="Upload every file of a directory (sorted by name) and save the root hash.",
    )
    upload_parser.add_argument(
        "--files-dir",
        type=str,
        required=True,
        help="Directory holding the files to upload",
    )
    upload_parser.add_argument(
        "--root-hash-out",
        type=str,
        default=None,
        help="Where to save the root hash (default: from config or ./merkle_root_hash.txt)",
    )
    upload_parser.add_argument(
        "--tree-out",
        type=str,
        default=None,
        help="Also build the tree locally and save it here",
    )
    upload_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    upload_parser.set_defaults(func=upload.upload_cmd)

    # --- download command ---
    download_parser = subparsers.add_parser(
        "download",
        help="Download a file by index",
    )
    download_parser.add_argument("--index", "-i", type=int, required=True, help="File index")
    download_parser.add_argument(
        "--out", "-o",
        type=str,
        required=True,
        help="Output file, or directory to save file{index}.bin into",
    )
    download_parser.set_defaults(func=download.download_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Fetch the Merkle proof of a file",
    )
    proof_parser.add_argument("--index", "-i", type=int, required=True, help="File index")
    proof_parser.add_argument(
        "--out", "-o",
        type=str,
        required=True,
        help="Output file, or directory to save proof_file{index}.json into",
    )
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build the Merkle tree of a directory offline",
    )
    build_parser.add_argument("--files-dir", type=str, required=True, help="Directory holding the files")
    build_parser.add_argument("--tree-out", type=str, required=True, help="Where to save the tree JSON")
    build_parser.add_argument("--root-hash-out", type=str, default=None, help="Where to save the root hash")
    build_parser.set_defaults(func=build.build_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a downloaded file offline",
        description="Recompute the root hash from a file and its proof and compare it to the saved root hash.",
    )
    verify_parser.add_argument("--file", "-f", type=str, required=True, help="Downloaded file")
    verify_parser.add_argument("--index", "-i", type=int, required=True, help="File index")
    verify_parser.add_argument("--proof", "-p", type=str, required=True, help="Proof JSON file")
    verify_parser.add_argument(
        "--root-hash", "-r",
        type=str,
        default=None,
        help="Root hash file (default: from config)",
    )
    verify_parser.add_argument(
        "--tree", "-t",
        type=str,
        default=None,
        help="Locally kept tree JSON (default: from config, if present)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="vault.json",
        help="Path for config file (default: vault.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (VAULT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: vault config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
