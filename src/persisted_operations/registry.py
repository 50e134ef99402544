"""
Lookup strategy resolution with memoization.

The OperationRegistry owns the two long-lived caches of this package:
resolved getters keyed by options identity, and directory stores keyed by
path. Create one at server startup and pass it to whatever resolves
operations; its lifetime is the lifetime of those caches.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Union

from .errors import ConfigurationConflict, NotConfigured
from .options import DEFAULT_REFRESH_INTERVAL, PersistedOperationsOptions
from .stores.base import OperationGetter
from .stores.directory import DirectoryOperationStore
from .stores.static import getter_for_mapping

logger = logging.getLogger(__name__)

__all__ = ["OperationRegistry"]

_NOT_CONFIGURED_MESSAGE = (
    "Server misconfiguration issue: persisted operations (operation allowlist) is in place, "
    "but the server has not been told how to fetch the allowed operations. Please provide one "
    "of the persisted operations configuration options."
)


def _not_configured(hash: str) -> str:
    raise NotConfigured(_NOT_CONFIGURED_MESSAGE)


@dataclass
class OperationRegistry:
    """
    Registry of resolved lookup strategies.
    
    Getters are cached by options object identity: two options objects with
    identical contents resolve separately. Entries are never evicted, so a
    caller that builds a new options object per request grows this cache
    without bound. Reuse options objects.
    
    Directory stores are cached by path so each directory is scanned by
    exactly one background loop. A store whose event loop has ended is
    restarted on the current loop the next time it is resolved.
    """
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    # id(options) -> (options, getter); options is kept so its id stays unique
    _getters: dict[int, tuple[PersistedOperationsOptions, OperationGetter]] = field(default_factory=dict, repr=False)
    _directory_stores: dict[str, DirectoryOperationStore] = field(default_factory=dict, repr=False)
    
    def getter_for(self, options: PersistedOperationsOptions) -> OperationGetter:
        """
        Get or create the lookup getter for an options object.
        
        Args:
            options: Persisted operations options
            
        Returns:
            Getter mapping hash -> document. The same object is returned for
            every call with the same options object.
            
        Raises:
            ConfigurationConflict: If more than one lookup strategy is set
            RuntimeError: If a directory store has to be started outside a
                running event loop
        """
        cached = self._getters.get(id(options))
        if cached is not None:
            getter = cached[1]
            if isinstance(getter, DirectoryOperationStore):
                self._ensure_scanning(getter)
            return getter
        getter = self._make_getter(options)
        self._getters[id(options)] = (options, getter)
        return getter
    
    def prepare(self, options: PersistedOperationsOptions) -> None:
        """
        Resolve options eagerly at server startup.
        
        Surfaces configuration conflicts before the first request, and gives
        a directory store a head start on its first scan.
        """
        self.getter_for(options)
    
    def directory_store(self, directory: Union[str, os.PathLike]) -> DirectoryOperationStore:
        """
        Get or create the store for a directory and make sure it is scanning.
        
        Args:
            directory: Directory of `<hash>.graphql` files
            
        Returns:
            The single DirectoryOperationStore for this path
        
        Raises:
            RuntimeError: If the store has to be started outside a running
                event loop
        """
        key = os.fspath(directory)
        store = self._directory_stores.get(key)
        if store is None:
            store = DirectoryOperationStore(key, refresh_interval=self.refresh_interval)
            store.start()
            self._directory_stores[key] = store
        else:
            self._ensure_scanning(store)
        return store
    
    async def close(self) -> None:
        """Stop every directory refresh loop owned by this registry."""
        for store in self._directory_stores.values():
            await store.stop()
    
    def _ensure_scanning(self, store: DirectoryOperationStore) -> None:
        # The loop that ran the refresh task may have ended since
        if not store.running:
            logger.debug(f"Restarting scan of {store.directory} on the current event loop")
            store.start()
    
    def _make_getter(self, options: PersistedOperationsOptions) -> OperationGetter:
        specified = options.lookup_options_specified()
        if len(specified) > 1:
            joined = "' and '".join(specified)
            raise ConfigurationConflict(
                f"'{joined}' were specified, at most one of these options can be specified.",
                options_specified=specified,
            )
        
        if options.persisted_operations_getter is not None:
            return options.persisted_operations_getter
        if options.persisted_operations is not None:
            return getter_for_mapping(options.persisted_operations)
        if options.persisted_operations_directory is not None:
            return self.directory_store(options.persisted_operations_directory)
        
        logger.debug("No persisted operations lookup configured; lookups will fail")
        return _not_configured
