"""
Blob Store Module

In-memory file store pairing the uploaded files with their Merkle tree.
"""

from .file_store import FileStore, StoreSnapshot

__all__ = [
    "FileStore",
    "StoreSnapshot",
]
