"""
Directory-backed lookup strategy.

Serves operations from a flat directory of `<hash>.graphql` files.

Request hooks call lookups synchronously, so the first request for a hash has
to read its file synchronously. To keep that cost bounded, the contents are
cached forever after the first read, and the directory is rescanned in the
background so that requests for hashes we have never seen are rejected
without touching the filesystem.
"""
from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..errors import UnknownHash
from ..hash_safety import OPERATION_SUFFIX, hash_from_filename, validate_hash
from ..options import DEFAULT_REFRESH_INTERVAL

logger = logging.getLogger(__name__)

__all__ = ["DirectoryOperationStore"]


class DirectoryOperationStore:
    """
    Lookup strategy reading persisted operations from a directory.
    
    State:
    - known files: a frozenset snapshot of `*.graphql` names from the last
      successful scan, replaced wholesale on every scan
    - operations: hash -> document, filled on first successful read and never
      invalidated (documents are immutable once published under a hash)
    
    The refresh loop runs as an asyncio task on the loop that calls start().
    It scans, then sleeps refresh_interval, then scans again, so slow scans
    never overlap. A failed scan is logged and the previous snapshot kept.
    
    Create stores through OperationRegistry.directory_store() so each
    directory gets exactly one refresh loop.
    """
    
    def __init__(self, directory: Union[str, os.PathLike], *,
                 refresh_interval: float = DEFAULT_REFRESH_INTERVAL) -> None:
        """
        Initialize the store. Scanning does not begin until start().
        
        Args:
            directory: Directory containing `<hash>.graphql` files
            refresh_interval: Seconds to wait after a scan before the next one
        """
        if refresh_interval <= 0:
            raise ValueError(f"refresh_interval must be positive, got {refresh_interval}")
        self._directory = Path(directory)
        self._refresh_interval = refresh_interval
        self._known_files: frozenset[str] = frozenset()
        self._operations: dict[str, str] = {}
        self._scanned = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
    
    @property
    def directory(self) -> Path:
        return self._directory
    
    @property
    def refresh_interval(self) -> float:
        return self._refresh_interval
    
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
    
    def known_hashes(self) -> list[str]:
        """Sorted hashes present in the current snapshot."""
        hashes = (hash_from_filename(name) for name in self._known_files)
        return sorted(h for h in hashes if h is not None)
    
    def start(self) -> None:
        """
        Start the background refresh loop on the running event loop.
        
        Calling start() on a running store is a no-op. A store whose loop has
        ended (e.g. after asyncio.run() returned) can be started again on a
        new loop; it keeps its snapshot and cache, and wait_for_scan() then
        waits for the first scan on the new loop.
        
        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.running:
            return
        loop = asyncio.get_running_loop()
        if self._loop is not None and self._loop is not loop:
            # asyncio.Event binds to the loop that first waits on it
            self._scanned = asyncio.Event()
        self._loop = loop
        self._task = loop.create_task(
            self._refresh_loop(), name=f"persisted-operations-scan:{self._directory}"
        )
        logger.debug(f"Started scanning {self._directory} every {self._refresh_interval}s")
    
    async def stop(self) -> None:
        """Cancel the refresh loop. The snapshot and cache are kept."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Stopped scanning {self._directory}")
    
    async def wait_for_scan(self) -> None:
        """Wait until the first scan attempt (successful or not) has finished."""
        await self._scanned.wait()
    
    async def refresh(self) -> None:
        """
        Scan the directory once and replace the known-files snapshot.
        
        Never raises: listing errors are logged and the previous snapshot is
        retained.
        """
        try:
            names = await asyncio.to_thread(os.listdir, self._directory)
        except Exception as e:
            logger.error(f"Error occurred whilst scanning '{self._directory}': {e}", exc_info=True)
            return
        self._known_files = frozenset(name for name in names if name.endswith(OPERATION_SUFFIX))
        logger.debug(f"Scanned {self._directory}: {len(self._known_files)} operation file(s)")
    
    async def _refresh_loop(self) -> None:
        while True:
            await self.refresh()
            self._scanned.set()
            await asyncio.sleep(self._refresh_interval)
    
    def get(self, hash: str) -> str:
        """
        Return the operation document for a hash.
        
        Args:
            hash: Client-supplied operation hash
            
        Returns:
            Contents of `<hash>.graphql`
            
        Raises:
            InvalidHash: If hash contains characters outside [a-zA-Z0-9_-]
            UnknownHash: If `<hash>.graphql` was not in the last scan
            OSError: If the file is listed but cannot be read
        """
        validate_hash(hash)
        operation = self._operations.get(hash)
        if operation is not None:
            return operation
        
        filename = f"{hash}{OPERATION_SUFFIX}"
        if filename not in self._known_files:
            raise UnknownHash(f"Could not find file for hash '{hash}'", hash=hash)
        
        # Only reached for files the last scan saw; the single blocking read
        # per hash on the request path.
        operation = self._read_operation(filename)
        self._operations[hash] = operation
        return operation
    
    def __call__(self, hash: str) -> str:
        return self.get(hash)
    
    def _read_operation(self, filename: str) -> str:
        return (self._directory / filename).read_text(encoding="utf-8")
