"""
File Store

Server-side storage for the most recent upload batch.

The uploaded files and the Merkle tree built over them are kept together in
one immutable StoreSnapshot. A single lock guards the snapshot: uploads
replace it wholesale, and downloads and proof requests read it under the
same lock, so a reader never sees files from one batch paired with the tree
of another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Sequence

from core.merkle import MerkleTree, ProofNode, build_merkle_tree, generate_merkle_proof
from core.schemas.errors import IndexOutOfRangeError, NoTreeError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """Files of one upload batch and the tree built over them."""
    files: tuple[bytes, ...] = ()
    tree: MerkleTree = field(default_factory=MerkleTree)

    @property
    def file_count(self) -> int:
        return len(self.files)


class FileStore:
    """
    Thread-safe in-memory store for one upload batch.

    Usage:
        store = FileStore()
        root_hash = store.upload([b"a", b"b"])
        data = store.download(0)
        proof = store.get_proof(0)
    """

    def __init__(self) -> None:
        self._snapshot = StoreSnapshot()
        self._lock = Lock()

    def upload(self, files: Sequence[bytes]) -> str:
        """
        Replace the stored batch and rebuild the tree.

        Args:
            files: Ordered file contents

        Returns:
            Root hash of the new tree

        Raises:
            EmptyInputError: If files is empty (stored batch is unchanged)
        """
        batch = tuple(bytes(f) for f in files)
        tree = build_merkle_tree(batch)
        with self._lock:
            self._snapshot = StoreSnapshot(files=batch, tree=tree)
        logger.info(f"Stored {len(batch)} files with root hash {tree.root_hash}")
        return tree.root_hash

    def download(self, index: int) -> bytes:
        """
        Return the file at the given index.

        Raises:
            NoTreeError: If nothing has been uploaded yet
            IndexOutOfRangeError: If index is outside the stored batch
        """
        with self._lock:
            snapshot = self._snapshot
            if snapshot.tree.root is None:
                raise NoTreeError("no files have been uploaded")
            if isinstance(index, bool) or not 0 <= index < snapshot.file_count:
                raise IndexOutOfRangeError(index, snapshot.file_count)
            return snapshot.files[index]

    def get_proof(self, index: int) -> list[ProofNode]:
        """
        Generate the Merkle proof for the file at the given index.

        Raises:
            NoTreeError: If nothing has been uploaded yet
            IndexOutOfRangeError: If index is outside the stored batch
        """
        with self._lock:
            return generate_merkle_proof(self._snapshot.tree, index)

    def snapshot(self) -> StoreSnapshot:
        """Return the current batch as one consistent value."""
        with self._lock:
            return self._snapshot

    @property
    def root_hash(self) -> str:
        return self.snapshot().tree.root_hash

    @property
    def file_count(self) -> int:
        return self.snapshot().file_count

    def clear(self) -> None:
        """Drop the stored batch."""
        with self._lock:
            self._snapshot = StoreSnapshot()
