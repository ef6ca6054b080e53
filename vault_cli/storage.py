"""
Client-side Storage

Reads upload batches from disk and persists the client's trust anchor:
the root hash, an optional copy of the tree, and downloaded proofs.

Layout:
- root hash: a text file holding one lowercase hex digest
- tree: JSON of nested {hash, left_idx, right_idx, left, right} records
- proof: JSON list of {hash, left_idx, right_idx} records
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.crypto.hashing import is_digest_hex
from core.merkle import MerkleTree, ProofNode, proofs_from_json, proofs_to_json


logger = logging.getLogger(__name__)


def list_files_in_dir(dir_path: str | Path) -> list[Path]:
    """
    List the regular files of a directory in upload order (sorted by name).

    Raises:
        FileNotFoundError: If the directory does not exist
        NotADirectoryError: If the path is not a directory
    """
    path = Path(dir_path)
    if not path.exists():
        raise FileNotFoundError(f"Directory not found: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    return sorted((p for p in path.iterdir() if p.is_file()), key=lambda p: p.name)


def read_files_from_dir(dir_path: str | Path) -> list[bytes]:
    """Read every regular file of a directory, in upload order."""
    paths = list_files_in_dir(dir_path)
    logger.info(f"Read {len(paths)} files from {dir_path}")
    return [p.read_bytes() for p in paths]


def write_file(path: str | Path, content: str | bytes) -> Path:
    """Write text or bytes, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


def save_root_hash(path: str | Path, root_hash: str) -> Path:
    return write_file(path, root_hash.strip().lower() + "\n")


def load_root_hash(path: str | Path) -> str:
    """
    Read a persisted root hash.

    Raises:
        ValueError: If the file does not hold a SHA-256 hex digest
    """
    root_hash = Path(path).read_text(encoding="utf-8").strip().lower()
    if not is_digest_hex(root_hash):
        raise ValueError(f"{path} does not contain a valid root hash")
    return root_hash


def save_tree(path: str | Path, tree: MerkleTree) -> Path:
    return write_file(path, tree.to_json(indent=2))


def load_tree(path: str | Path) -> MerkleTree:
    """
    Read a persisted tree.

    Raises:
        MalformedTreeError: If the JSON is not a consistent tree
    """
    return MerkleTree.from_json(Path(path).read_text(encoding="utf-8"))


def save_proof(path: str | Path, proofs: list[ProofNode]) -> Path:
    return write_file(path, proofs_to_json(proofs, indent=2))


def load_proof(path: str | Path) -> list[ProofNode]:
    """
    Read a persisted proof.

    Raises:
        MalformedProofError: If the JSON is not a list of proof records
    """
    return proofs_from_json(Path(path).read_text(encoding="utf-8"))


def resolve_output_path(output_path: str | Path, default_name: str) -> Path:
    """Append default_name when output_path is an existing directory."""
    path = Path(output_path)
    if path.is_dir():
        return path / default_name
    return path
