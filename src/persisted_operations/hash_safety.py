"""
Hash safety utilities for persisted operations.

This module provides shared validation for client-supplied hashes before
they are used to build filenames, preventing directory traversal and
injection through the hash value.
"""
from __future__ import annotations

import re

from .errors import InvalidHash

OPERATION_SUFFIX = ".graphql"

_HASH_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")


def validate_hash(hash: str) -> str:
    """
    Validate a client-supplied hash against the allowed character set.
    
    This function enforces the following safety rules:
    - Must be a non-empty string
    - Only ASCII letters, digits, '-' and '_' (no '.', '/', '\\' or NUL)
    
    Args:
        hash: Client-supplied operation hash
        
    Returns:
        The hash, unchanged
        
    Raises:
        InvalidHash: If hash violates safety rules
        
    Examples:
        >>> validate_hash("deadbeef")
        'deadbeef'
        
        >>> validate_hash("../etc/passwd")
        InvalidHash: Invalid hash
        
        >>> validate_hash("")
        InvalidHash: Invalid hash
    """
    if not isinstance(hash, str) or not _HASH_PATTERN.fullmatch(hash):
        raise InvalidHash("Invalid hash", hash=hash if isinstance(hash, str) else None)
    return hash


def operation_filename(hash: str) -> str:
    """Return the `<hash>.graphql` filename for a validated hash."""
    return f"{validate_hash(hash)}{OPERATION_SUFFIX}"


def hash_from_filename(filename: str) -> str | None:
    """
    Return the hash encoded in an operation filename, or None.
    
    Files that do not end in `.graphql` or whose stem is not a valid hash
    yield None.
    """
    if not filename.endswith(OPERATION_SUFFIX):
        return None
    stem = filename[: -len(OPERATION_SUFFIX)]
    if not _HASH_PATTERN.fullmatch(stem):
        return None
    return stem


__all__ = ["OPERATION_SUFFIX", "validate_hash", "operation_filename", "hash_from_filename"]
