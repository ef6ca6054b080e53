"""
Core cryptographic utilities.

Provides the hashing primitive used by the Merkle engine.
"""
from .hashing import (
    DIGEST_SIZE,
    DIGEST_HEX_LENGTH,
    sha256,
    digest_hex,
    to_hex,
    from_hex,
    is_digest_hex,
    hash_concat,
)

__all__ = [
    "DIGEST_SIZE",
    "DIGEST_HEX_LENGTH",
    "sha256",
    "digest_hex",
    "to_hex",
    "from_hex",
    "is_digest_hex",
    "hash_concat",
]
