"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like options and the
operation registry, avoiding global state.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .options import PersistedOperationsOptions, load_options, refresh_interval_from_env
from .registry import OperationRegistry
from .resolver import PersistedOperations


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.
    
    Holds the options built from config file and flags, and lazily creates
    the registry that caches resolved lookup strategies for this command.
    """
    options: PersistedOperationsOptions
    _registry: Optional[OperationRegistry] = None
    
    @classmethod
    def from_flags(
        cls,
        config: Optional[Path] = None,
        persisted_operations_directory: Optional[str] = None,
        allow_unpersisted_operations: Optional[bool] = None,
    ) -> CLIContext:
        """
        Create CLI context from a config file overlaid with CLI flags.
        """
        options = load_options(
            config,
            persisted_operations_directory=persisted_operations_directory,
            allow_unpersisted_operations=allow_unpersisted_operations,
        )
        return cls(options=options)
    
    @property
    def registry(self) -> OperationRegistry:
        """Get or create the registry (lazy initialization)."""
        if self._registry is None:
            self._registry = OperationRegistry(refresh_interval=refresh_interval_from_env())
        return self._registry
    
    @property
    def operations(self) -> PersistedOperations:
        return PersistedOperations(self.options, self.registry)
    
    async def ready(self) -> PersistedOperations:
        """
        Resolve the options and wait for a directory's first scan.
        
        Must be awaited inside the event loop that will serve lookups.
        """
        operations = self.operations
        operations.prepare()
        if self.options.persisted_operations_directory is not None:
            await self.registry.directory_store(self.options.persisted_operations_directory).wait_for_scan()
        return operations
    
    async def close(self) -> None:
        if self._registry is not None:
            await self._registry.close()
