"""
Merkle Proofs Convenience Wrappers
Proof (de)serialization and thin class-based wrappers around the core
Merkle tree functions.

This module provides:
- proofs_to_dicts / proofs_from_dicts: JSON-ready proof records
- proofs_to_json / proofs_from_json: proof files on disk and on the wire
- MerkleProver: Build trees and generate proofs from raw files
- MerkleVerifier: Verify proofs, optionally with a locally held tree
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional, Sequence

from core.merkle.merkle_tree import (
    MerkleTree,
    ProofLike,
    ProofNode,
    build_merkle_tree,
    generate_merkle_proof,
    verify_merkle_proof,
)
from core.schemas.errors import MalformedProofError, RootMismatchError


logger = logging.getLogger(__name__)


def proofs_to_dicts(proofs: Iterable[ProofNode]) -> list[dict[str, Any]]:
    """Serialize a proof as a list of {hash, left_idx, right_idx} records."""
    return [p.to_dict() for p in proofs]


def proofs_from_dicts(data: Any) -> list[ProofNode]:
    """
    Parse a proof from a list of records.

    Raises:
        MalformedProofError: If data is not a list of valid records
    """
    if not isinstance(data, list):
        raise MalformedProofError(f"proof must be a list, got {type(data).__name__}")

    proofs: list[ProofNode] = []
    for step, item in enumerate(data):
        try:
            proofs.append(ProofNode.from_dict(item))
        except MalformedProofError as e:
            raise MalformedProofError(e.message, step=step) from e
    return proofs


def proofs_to_json(proofs: Iterable[ProofNode], indent: int | None = None) -> str:
    return json.dumps(proofs_to_dicts(proofs), indent=indent)


def proofs_from_json(text: str) -> list[ProofNode]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedProofError(f"invalid proof JSON: {e}") from e
    return proofs_from_dicts(data)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> tree = MerkleProver.build([b"a", b"b", b"c"])
        >>> proof = MerkleProver.prove([b"a", b"b", b"c"], index=1)
        >>> [p.range for p in proof]
        [(2, 2), (0, 0)]
    """

    @staticmethod
    def build(files: Sequence[bytes]) -> MerkleTree:
        """
        Build a Merkle tree for a batch of files.

        Raises:
            EmptyInputError: If files is empty
        """
        return build_merkle_tree(files)

    @staticmethod
    def prove(files: Sequence[bytes], index: int) -> list[ProofNode]:
        """
        Build a tree over files and generate the proof for one index.

        Raises:
            EmptyInputError: If files is empty
            IndexOutOfRangeError: If index is out of range
        """
        return generate_merkle_proof(build_merkle_tree(files), index)

    @staticmethod
    def compute_root(files: Sequence[bytes]) -> str:
        """Compute the root hash for a batch of files."""
        return build_merkle_tree(files).root_hash


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs on the client side.

    A False result and a malformed proof mean the same thing to the caller:
    the file must not be trusted.
    """

    @staticmethod
    def verify(
        blob: bytes,
        index: int,
        proof: Iterable[ProofLike],
        root_hash: str,
        *,
        leaf_count: int | None = None,
    ) -> bool:
        """
        Verify a file against a trusted root hash.

        Returns:
            True if the proof is valid, False otherwise (never raises for a
            malformed proof)
        """
        return verify_merkle_proof(
            blob, index, list(proof), root_hash, leaf_count=leaf_count
        )

    @staticmethod
    def verify_with_tree(
        blob: bytes,
        index: int,
        proof: Iterable[ProofLike],
        root_hash: str,
        tree: Optional[MerkleTree],
    ) -> bool:
        """
        Verify a file, using a locally stored tree when one is available.

        Returns False when the stored tree disagrees with the trusted root.
        """
        if tree is None or tree.root is None:
            return MerkleVerifier.verify(blob, index, proof, root_hash)

        try:
            return tree.verify_proof(blob, index, list(proof), root_hash)
        except RootMismatchError as e:
            logger.warning(
                f"Local tree root {e.details['actual']} does not match "
                f"trusted root {e.details['expected']}"
            )
            return False


__all__ = [
    "proofs_to_dicts",
    "proofs_from_dicts",
    "proofs_to_json",
    "proofs_from_json",
    "MerkleProver",
    "MerkleVerifier",
]
