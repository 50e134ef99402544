"""
Lookup strategies for persisted operations.
"""
from .base import OperationGetter
from .directory import DirectoryOperationStore
from .static import getter_for_mapping

__all__ = ["OperationGetter", "DirectoryOperationStore", "getter_for_mapping"]
