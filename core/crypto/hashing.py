"""
Hashing Utilities
Hashing primitive for the Merkle engine.

This module provides:
- SHA-256 hashing for raw bytes
- Hex digest rendering (lowercase, no prefix)
- Parent hashing over the raw bytes of two child digests

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Parent hashes concatenate the 32-byte digests, never their hex text
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
import re


DIGEST_SIZE = 32
DIGEST_HEX_LENGTH = DIGEST_SIZE * 2

_DIGEST_HEX_RE = re.compile(r"[0-9a-f]{64}")


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def digest_hex(data: bytes) -> str:
    """
    Compute the lowercase hex SHA-256 digest of raw bytes.

    This is the leaf hash of a file in the Merkle tree.

    Args:
        data: Raw bytes to hash

    Returns:
        64-character lowercase hex string
    """
    return hashlib.sha256(data).hexdigest()


def to_hex(data: bytes) -> str:
    """Convert bytes to a lowercase hex string (no prefix)."""
    return data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hex string to bytes.

    Args:
        hex_string: Hex string without prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string has odd length or contains invalid hex characters
    """
    if len(hex_string) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_string)}"
        )

    try:
        return bytes.fromhex(hex_string)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def is_digest_hex(value: object) -> bool:
    """Check whether value is a 64-character lowercase hex digest."""
    return isinstance(value, str) and bool(_DIGEST_HEX_RE.fullmatch(value))


def hash_concat(left: str, right: str) -> str:
    """
    Hash the concatenation of two hex digests.

    Used for computing Merkle parent hashes:
    parent = sha256(from_hex(left) + from_hex(right))

    Args:
        left: Left child digest (hex)
        right: Right child digest (hex)

    Returns:
        Parent digest (hex)
    """
    return digest_hex(from_hex(left) + from_hex(right))


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
