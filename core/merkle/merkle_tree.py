"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification
over an ordered batch of files.

This module provides:
- TreeNode: recursive tree node (leaf or internal) covering a leaf range
- ProofNode: sibling descriptor carried in a proof
- MerkleTree: immutable tree wrapper with (de)serialization helpers
- build_merkle_tree / generate_merkle_proof / verify_merkle_proof

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = sha256(file_bytes), rendered as lowercase hex
2. Parent hashing: parent = sha256(raw(left) + raw(right)), where raw() is
   the 32-byte digest, never its hex text
3. Split rule: a range of size s gives floor(s/2) leaves to the left child
   and the remainder to the right child
4. Empty batch: rejected with EmptyInputError (no sentinel root)
5. Single leaf: root = leaf, proof is empty

Proof Order:
- Proofs are ordered leaf-to-root. Each sibling carries its (left_idx,
  right_idx) range so the verifier can tell whether it sits to the left or
  to the right of the running hash without the original tree.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from core.crypto.hashing import digest_hex, hash_concat, is_digest_hex
from core.schemas.errors import (
    EmptyInputError,
    IndexOutOfRangeError,
    MalformedProofError,
    MalformedTreeError,
    NoTreeError,
    RootMismatchError,
)


logger = logging.getLogger(__name__)


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class TreeNode:
    """
    A node in the Merkle tree.

    A leaf covers exactly one file (left_idx == right_idx) and has no
    children. An internal node owns both children and covers the union of
    their contiguous ranges.

    Attributes:
        hash: Hex digest of the file (leaf) or of the children (internal)
        left_idx: First leaf index covered, inclusive
        right_idx: Last leaf index covered, inclusive
        left: Left child, None for a leaf
        right: Right child, None for a leaf
    """
    hash: str
    left_idx: int
    right_idx: int
    left: Optional["TreeNode"] = None
    right: Optional["TreeNode"] = None

    def __post_init__(self) -> None:
        """Validate node structure."""
        if not _is_index(self.left_idx) or not _is_index(self.right_idx):
            raise MalformedTreeError("node indices must be integers")
        if self.left_idx < 0 or self.left_idx > self.right_idx:
            raise MalformedTreeError(
                f"invalid node range ({self.left_idx}, {self.right_idx})"
            )
        if (self.left is None) != (self.right is None):
            raise MalformedTreeError(
                "node must have either two children or none",
                details={"range": [self.left_idx, self.right_idx]},
            )
        if self.left is None:
            if self.left_idx != self.right_idx:
                raise MalformedTreeError(
                    f"leaf must cover a single index, got ({self.left_idx}, {self.right_idx})"
                )
            return
        if (
            self.left.left_idx != self.left_idx
            or self.right.right_idx != self.right_idx
            or self.left.right_idx + 1 != self.right.left_idx
        ):
            raise MalformedTreeError(
                "children ranges are not contiguous with the parent range",
                details={
                    "range": [self.left_idx, self.right_idx],
                    "left": [self.left.left_idx, self.left.right_idx],
                    "right": [self.right.left_idx, self.right.right_idx],
                },
            )

    @property
    def range(self) -> tuple[int, int]:
        return (self.left_idx, self.right_idx)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def leaf_count(self) -> int:
        """Number of leaves covered by this subtree."""
        return self.right_idx - self.left_idx + 1

    @property
    def depth(self) -> int:
        """Number of edges from this node down to its deepest leaf."""
        if self.is_leaf:
            return 0
        return 1 + max(self.left.depth, self.right.depth)

    def to_dict(self) -> dict[str, Any]:
        """Serialize as a nested {hash, left_idx, right_idx, left, right} record."""
        return {
            "hash": self.hash,
            "left_idx": self.left_idx,
            "right_idx": self.right_idx,
            "left": self.left.to_dict() if self.left is not None else None,
            "right": self.right.to_dict() if self.right is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "TreeNode":
        """
        Rebuild a node (and its subtree) from a nested record.

        Raises:
            MalformedTreeError: If the record is missing fields, has the
                wrong types, or violates the node invariants
        """
        if not isinstance(data, dict):
            raise MalformedTreeError(f"tree node must be an object, got {type(data).__name__}")

        node_hash = data.get("hash")
        if not is_digest_hex(node_hash):
            raise MalformedTreeError(f"invalid node hash: {node_hash!r}")

        left_data = data.get("left")
        right_data = data.get("right")
        return cls(
            hash=node_hash,
            left_idx=data.get("left_idx"),
            right_idx=data.get("right_idx"),
            left=cls.from_dict(left_data) if left_data is not None else None,
            right=cls.from_dict(right_data) if right_data is not None else None,
        )


@dataclass(frozen=True)
class ProofNode:
    """
    A sibling descriptor in a Merkle proof.

    Proofs are standalone: a ProofNode never references the tree it came
    from.

    Attributes:
        hash: Hex digest of the sibling subtree
        left_idx: First leaf index covered by the sibling
        right_idx: Last leaf index covered by the sibling
    """
    hash: str
    left_idx: int
    right_idx: int

    @property
    def range(self) -> tuple[int, int]:
        return (self.left_idx, self.right_idx)

    @classmethod
    def from_node(cls, node: TreeNode) -> "ProofNode":
        return cls(hash=node.hash, left_idx=node.left_idx, right_idx=node.right_idx)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "left_idx": self.left_idx,
            "right_idx": self.right_idx,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ProofNode":
        """
        Parse a sibling descriptor record.

        Nested children (present in proofs written by tools that dump whole
        tree nodes) are ignored.

        Raises:
            MalformedProofError: If fields are missing or have the wrong type
        """
        if not isinstance(data, dict):
            raise MalformedProofError(
                f"proof node must be an object, got {type(data).__name__}"
            )
        node_hash = data.get("hash")
        left_idx = data.get("left_idx")
        right_idx = data.get("right_idx")
        if not isinstance(node_hash, str):
            raise MalformedProofError(f"invalid proof node hash: {node_hash!r}")
        if not _is_index(left_idx) or not _is_index(right_idx):
            raise MalformedProofError(
                f"invalid proof node range: ({left_idx!r}, {right_idx!r})"
            )
        return cls(hash=node_hash, left_idx=left_idx, right_idx=right_idx)


ProofLike = Union[ProofNode, TreeNode, dict]


def split_range(lo: int, hi: int) -> tuple[int, int, int, int]:
    """
    Split the inclusive leaf range [lo, hi] into its two child ranges.

    The left child receives floor(size/2) leaves, the right child the rest.
    Example: [0, 2] -> (0, 0, 1, 2)

    Args:
        lo: First leaf index
        hi: Last leaf index (must be > lo)

    Returns:
        (left_lo, left_hi, right_lo, right_hi)
    """
    size = hi - lo + 1
    mid = lo + size // 2 - 1
    return lo, mid, mid + 1, hi


def _build_node(leaves: Sequence[bytes], lo: int, hi: int) -> TreeNode:
    if lo == hi:
        return TreeNode(hash=digest_hex(leaves[lo]), left_idx=lo, right_idx=hi)

    left_lo, left_hi, right_lo, right_hi = split_range(lo, hi)
    left = _build_node(leaves, left_lo, left_hi)
    right = _build_node(leaves, right_lo, right_hi)

    return TreeNode(
        hash=hash_concat(left.hash, right.hash),
        left_idx=lo,
        right_idx=hi,
        left=left,
        right=right,
    )


@dataclass(frozen=True)
class MerkleTree:
    """
    An immutable Merkle tree over an ordered batch of files.

    A tree with root None represents "no tree built yet". Rebuilding
    produces a new MerkleTree; existing trees are never modified.
    """
    root: Optional[TreeNode] = None

    @classmethod
    def build(cls, leaves: Sequence[bytes]) -> "MerkleTree":
        return build_merkle_tree(leaves)

    @property
    def root_hash(self) -> str:
        """Root digest, or an empty string when no tree has been built."""
        return self.root.hash if self.root is not None else ""

    @property
    def leaf_count(self) -> int:
        return self.root.leaf_count if self.root is not None else 0

    @property
    def depth(self) -> int:
        return self.root.depth if self.root is not None else 0

    def generate_proof(self, leaf_idx: int) -> list[ProofNode]:
        return generate_merkle_proof(self, leaf_idx)

    def find_leaf(self, leaf_idx: int) -> TreeNode:
        """
        Find the leaf node at the given index by descending child ranges.

        Raises:
            NoTreeError: If the tree is empty
            IndexOutOfRangeError: If leaf_idx is outside [0, n-1]
        """
        node = self._require_root()
        _check_index(leaf_idx, self.leaf_count)
        while not node.is_leaf:
            node = node.left if leaf_idx <= node.left.right_idx else node.right
        return node

    def verify_proof(
        self,
        blob: bytes,
        leaf_idx: int,
        proof: Iterable[ProofLike],
        root_hash: str,
    ) -> bool:
        """
        Verify a proof using this (locally held) tree as extra context.

        The claimed root must match this tree's root, the file must match
        the stored leaf, and the proof must fold up to the root while
        spanning every leaf of the tree.

        Raises:
            NoTreeError: If the tree is empty
            RootMismatchError: If root_hash is not this tree's root
        """
        root = self._require_root()
        claimed = _normalize_root(root_hash)
        if claimed != root.hash:
            raise RootMismatchError(expected=claimed, actual=root.hash)

        try:
            leaf = self.find_leaf(leaf_idx)
        except IndexOutOfRangeError:
            logger.warning(f"Leaf index {leaf_idx} is not part of the local tree")
            return False
        if leaf.hash != digest_hex(blob):
            logger.info(f"File {leaf_idx} does not match the leaf hash in the local tree")
            return False

        return verify_merkle_proof(
            blob,
            leaf_idx,
            proof,
            root_hash,
            leaf_count=self.leaf_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"root": self.root.to_dict() if self.root is not None else None}

    @classmethod
    def from_dict(cls, data: Any, *, check_hashes: bool = True) -> "MerkleTree":
        """
        Rebuild a tree from its serialized form.

        Args:
            data: Mapping with a "root" key holding a nested node record
            check_hashes: Recompute every internal hash from its children

        Raises:
            MalformedTreeError: If the structure or hashes are inconsistent
        """
        if not isinstance(data, dict) or "root" not in data:
            raise MalformedTreeError("serialized tree must be an object with a 'root' key")
        if data["root"] is None:
            return cls(root=None)

        try:
            root = TreeNode.from_dict(data["root"])
            if root.left_idx != 0:
                raise MalformedTreeError(f"root must start at leaf 0, got {root.left_idx}")
            if check_hashes:
                _check_internal_hashes(root)
        except RecursionError as e:
            raise MalformedTreeError("serialized tree is nested too deeply") from e
        return cls(root=root)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str, *, check_hashes: bool = True) -> "MerkleTree":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedTreeError(f"invalid tree JSON: {e}") from e
        except RecursionError as e:
            raise MalformedTreeError("tree JSON is nested too deeply") from e
        return cls.from_dict(data, check_hashes=check_hashes)

    def _require_root(self) -> TreeNode:
        if self.root is None:
            raise NoTreeError()
        return self.root


def _check_internal_hashes(node: TreeNode) -> None:
    if node.is_leaf:
        return
    _check_internal_hashes(node.left)
    _check_internal_hashes(node.right)
    expected = hash_concat(node.left.hash, node.right.hash)
    if node.hash != expected:
        raise MalformedTreeError(
            f"hash mismatch at node ({node.left_idx}, {node.right_idx})",
            details={"expected": expected, "actual": node.hash},
        )


def _check_index(leaf_idx: Any, leaf_count: int) -> None:
    if not _is_index(leaf_idx) or not 0 <= leaf_idx < leaf_count:
        raise IndexOutOfRangeError(leaf_idx, leaf_count)


def _normalize_root(root_hash: Any) -> str:
    if isinstance(root_hash, bytes):
        root_hash = root_hash.decode("ascii", errors="replace")
    if not isinstance(root_hash, str):
        return ""
    return root_hash.strip().lower()


def build_merkle_tree(leaves: Sequence[bytes]) -> MerkleTree:
    """
    Build a Merkle tree from an ordered sequence of files.

    Algorithm: recursive divide on [0, n-1]. A single index yields a leaf
    holding digest(file). Larger ranges are split with split_range(), both
    halves are built recursively and the parent hashes their digests in
    left-then-right order.

    Example: [a, b, c] -> left = [a], right = [b, c]
        root = H(H(a) + H(H(b) + H(c)))

    Args:
        leaves: Ordered file contents. Order matters and is preserved.

    Returns:
        MerkleTree of depth ceil(log2 n)

    Raises:
        EmptyInputError: If leaves is empty
    """
    n = len(leaves)
    if n == 0:
        raise EmptyInputError()

    logger.info(f"Creating a new Merkle tree with {n} files")
    root = _build_node(leaves, 0, n - 1)
    return MerkleTree(root=root)


def generate_merkle_proof(tree: Optional[MerkleTree], leaf_idx: int) -> list[ProofNode]:
    """
    Generate a Merkle proof for the leaf at the given index.

    Algorithm:
    1. Start at the root
    2. At each internal node, step into the child whose range contains
       leaf_idx and record the other child as a sibling
    3. Stop at the leaf and reverse the siblings so the list runs
       leaf-to-root

    Args:
        tree: Tree to prove against
        leaf_idx: 0-based index of the file

    Returns:
        Sibling descriptors, first element adjacent to the leaf

    Raises:
        NoTreeError: If tree is None or empty
        IndexOutOfRangeError: If leaf_idx is outside [0, n-1]
    """
    if tree is None or tree.root is None:
        raise NoTreeError()

    logger.info(f"Generating Merkle proof for file index {leaf_idx}")
    _check_index(leaf_idx, tree.leaf_count)

    siblings: list[ProofNode] = []
    node = tree.root
    while not node.is_leaf:
        if leaf_idx <= node.left.right_idx:
            siblings.append(ProofNode.from_node(node.right))
            node = node.left
        else:
            siblings.append(ProofNode.from_node(node.left))
            node = node.right

    siblings.reverse()
    return siblings


def proof_indices(tree: Optional[MerkleTree], leaf_idx: int) -> list[tuple[int, int]]:
    """Ranges of the siblings in the proof for leaf_idx, in proof order."""
    return [node.range for node in generate_merkle_proof(tree, leaf_idx)]


def _coerce_proof_node(item: ProofLike, step: int) -> ProofNode:
    if isinstance(item, ProofNode):
        return item
    if isinstance(item, TreeNode):
        return ProofNode.from_node(item)
    try:
        return ProofNode.from_dict(item)
    except MalformedProofError as e:
        raise MalformedProofError(e.message, step=step) from e


def fold_proof(
    blob: bytes,
    leaf_idx: int,
    proof: Iterable[ProofLike],
) -> tuple[str, tuple[int, int]]:
    """
    Recompute the subtree hash and range reached by walking a proof.

    Algorithm:
    1. Start with digest(blob) covering (leaf_idx, leaf_idx)
    2. For each sibling:
       - If it ends just before the running range: it was the left child,
         hash = parent(sibling, hash)
       - If it starts just after the running range: it was the right child,
         hash = parent(hash, sibling)
       - Otherwise the proof is malformed
       - Extend the running range to cover the sibling

    Returns:
        (computed hash, covered range)

    Raises:
        MalformedProofError: If a step is not adjacent to the running range
            or a sibling is not a valid digest
    """
    if not _is_index(leaf_idx) or leaf_idx < 0:
        raise MalformedProofError(f"invalid leaf index: {leaf_idx!r}")

    current = digest_hex(blob)
    lo = hi = leaf_idx

    for step, item in enumerate(proof):
        sibling = _coerce_proof_node(item, step)
        sibling_hash = sibling.hash.lower()
        if not is_digest_hex(sibling_hash):
            raise MalformedProofError(
                f"sibling hash is not a SHA-256 hex digest: {sibling.hash!r}",
                step=step,
            )
        if sibling.left_idx < 0 or sibling.left_idx > sibling.right_idx:
            raise MalformedProofError(
                f"sibling has an invalid range {sibling.range}",
                step=step,
            )

        if sibling.right_idx + 1 == lo:
            current = hash_concat(sibling_hash, current)
            lo = sibling.left_idx
        elif sibling.left_idx == hi + 1:
            current = hash_concat(current, sibling_hash)
            hi = sibling.right_idx
        else:
            raise MalformedProofError(
                f"sibling range {sibling.range} is not adjacent to ({lo}, {hi})",
                step=step,
            )

    return current, (lo, hi)


def verify_merkle_proof(
    blob: bytes,
    leaf_idx: int,
    proof: Iterable[ProofLike],
    root_hash: str,
    *,
    leaf_count: int | None = None,
    strict: bool = False,
) -> bool:
    """
    Verify that blob is the file at leaf_idx under root_hash.

    The proof must fold up to a range starting at leaf 0 and, when
    leaf_count is known, ending at leaf_count - 1. This rejects truncated
    proofs that stop at a sub-root.

    Args:
        blob: Raw file contents as downloaded
        leaf_idx: Claimed index of the file
        proof: Sibling descriptors in leaf-to-root order
        root_hash: Trusted root hash held by the client
        leaf_count: Number of files in the batch, if known
        strict: Raise MalformedProofError instead of returning False

    Returns:
        True if the recomputed root matches and the proof spans the batch

    Raises:
        MalformedProofError: Only when strict=True
    """
    try:
        computed, (lo, hi) = fold_proof(blob, leaf_idx, proof)
        if lo != 0:
            raise MalformedProofError(
                f"proof ends at range ({lo}, {hi}) which does not start at leaf 0"
            )
        if leaf_count is not None and hi != leaf_count - 1:
            raise MalformedProofError(
                f"proof ends at range ({lo}, {hi}) but the batch has {leaf_count} files"
            )
    except MalformedProofError as e:
        if strict:
            raise
        logger.warning(f"Rejecting malformed proof for file index {leaf_idx}: {e.message}")
        return False

    ok = computed == _normalize_root(root_hash)
    logger.debug(
        f"Verified file index {leaf_idx} against root {root_hash}: "
        f"computed={computed} ok={ok}"
    )
    return ok


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a tree with the given number of leaves.

    Depth counts edges from root to the deepest leaf: ceil(log2 n).
    A single leaf has depth 0, an empty tree has depth 0.
    """
    if num_leaves <= 1:
        return 0
    return (num_leaves - 1).bit_length()


__all__ = [
    "TreeNode",
    "ProofNode",
    "MerkleTree",
    "split_range",
    "build_merkle_tree",
    "generate_merkle_proof",
    "proof_indices",
    "fold_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
