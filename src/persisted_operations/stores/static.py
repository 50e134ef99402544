"""
Static mapping lookup strategy.
"""
from __future__ import annotations

from collections.abc import Mapping

from .base import OperationGetter

__all__ = ["getter_for_mapping"]


def getter_for_mapping(operations: Mapping[str, str]) -> OperationGetter:
    """
    Given a hash -> document mapping, return a getter that looks hashes up in it.
    
    The mapping is the cache; no copy is taken. Unknown hashes return None.
    """
    def get_operation(hash: str):
        return operations.get(hash)
    return get_operation
