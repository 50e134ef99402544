"""
Lookup strategy interface for persisted operations.

A lookup strategy is anything that maps a hash to an operation document.
The resolver only ever sees the plain OperationGetter callable; stateful
stores (like the directory store) are callable with the same signature.
"""
from __future__ import annotations

from typing import Callable, Optional

# hash -> document. May return None for "not found" or raise.
OperationGetter = Callable[[str], Optional[str]]

__all__ = ["OperationGetter"]
