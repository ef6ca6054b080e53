"""
Merkle Tree and Proofs
Deterministic Merkle tree construction + proof generation/verification
over an ordered batch of files.

This module provides:
- TreeNode / MerkleTree: the tree built once per upload batch
- ProofNode: sibling descriptor (hash + leaf range)
- build_merkle_tree: Build a tree from raw file contents
- generate_merkle_proof: Sibling chain for a file index, leaf-to-root
- verify_merkle_proof: Recompute the root from a file and its proof

Canonical Commitment Rules:
1. Leaf hashing: sha256(file_bytes)
2. Parent hashing: sha256(left_digest + right_digest), raw 32-byte digests
3. Split: left child covers floor(size/2) leaves, right child the rest
4. Empty batch: EmptyInputError
5. Single leaf: root = leaf, empty proof

Usage:
    from core.merkle import build_merkle_tree, generate_merkle_proof, verify_merkle_proof

    tree = build_merkle_tree([b"a", b"b", b"c", b"d"])
    proof = generate_merkle_proof(tree, 2)
    assert verify_merkle_proof(b"c", 2, proof, tree.root_hash)
"""
from .merkle_tree import (
    TreeNode,
    ProofNode,
    MerkleTree,
    split_range,
    build_merkle_tree,
    generate_merkle_proof,
    proof_indices,
    fold_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    proofs_to_dicts,
    proofs_from_dicts,
    proofs_to_json,
    proofs_from_json,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "TreeNode",
    "ProofNode",
    "MerkleTree",
    # Core functions
    "split_range",
    "build_merkle_tree",
    "generate_merkle_proof",
    "proof_indices",
    "fold_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Serialization
    "proofs_to_dicts",
    "proofs_from_dicts",
    "proofs_to_json",
    "proofs_from_json",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
