"""
Schemas
File: __init__.py

Purpose: Export the error taxonomy shared by the engine, store, API and CLI.
"""

from .errors import (
    EmptyInputError,
    ErrorCodes,
    IndexOutOfRangeError,
    MalformedProofError,
    MalformedTreeError,
    NoTreeError,
    RootMismatchError,
    VaultError,
    VaultException,
)

__all__ = [
    "EmptyInputError",
    "ErrorCodes",
    "IndexOutOfRangeError",
    "MalformedProofError",
    "MalformedTreeError",
    "NoTreeError",
    "RootMismatchError",
    "VaultError",
    "VaultException",
]
