"""
Options and configuration for persisted operations.

Centralizes the options a hosting server passes to the resolver and provides
validation with fail-fast behavior. Options can be built directly, from
environment variables, or from a YAML config file merged with CLI flags.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from .models import OptionsFile

__all__ = [
    "PersistedOperationsOptions",
    "BypassPolicy",
    "LOOKUP_OPTION_NAMES",
    "DEFAULT_REFRESH_INTERVAL",
    "create_options_from_env",
    "load_options",
    "refresh_interval_from_env",
]

# (request, payload) -> bool
BypassPolicy = Union[bool, Callable[[Any, Any], bool], None]

LOOKUP_OPTION_NAMES = (
    "persisted_operations_getter",
    "persisted_operations_directory",
    "persisted_operations",
)

DEFAULT_REFRESH_INTERVAL = 5.0


@dataclass(frozen=True, eq=False)
class PersistedOperationsOptions:
    """
    Options for persisted operation resolution.
    
    Lookup strategies (set at most one):
        persisted_operations: Static mapping of hash -> operation document
        persisted_operations_getter: Synchronous callable hash -> document.
            Performance critical; cache inside it if lookups are expensive.
        persisted_operations_directory: Directory of `<hash>.graphql` files,
            scanned in the background and read on first use of each hash.
            The background scan is an asyncio task, so this strategy must
            be resolved inside a running event loop; in a synchronous host
            prepare() raises RuntimeError and lookups resolve to None.

    Request handling:
        hash_from_payload: Override for extracting the hash from a request
            payload. Defaults to Apollo's
            `extensions.persistedQuery.sha256Hash`, then Relay's `documentId`.
        allow_unpersisted_operation: Whether a literal `query` may be used
            when the payload carries no hash. Either a bool, or a callable
            `(request, payload) -> bool` evaluated per request.
    
    Options objects are compared and cached by identity, so build one per
    server and reuse it.
    """
    persisted_operations: Optional[Mapping[str, str]] = None
    persisted_operations_getter: Optional[Callable[[str], str]] = None
    persisted_operations_directory: Optional[Union[str, os.PathLike]] = None
    hash_from_payload: Optional[Callable[[Any], Any]] = None
    allow_unpersisted_operation: BypassPolicy = None
    
    def __post_init__(self):
        """Validate option types on construction."""
        if self.persisted_operations is not None:
            if not isinstance(self.persisted_operations, Mapping):
                raise ValueError("persisted_operations must be a mapping of hash -> document")
            for key, value in self.persisted_operations.items():
                if not isinstance(key, str) or not isinstance(value, str):
                    raise ValueError(f"persisted_operations entries must be str -> str, got {key!r}")
        
        if self.persisted_operations_getter is not None and not callable(self.persisted_operations_getter):
            raise ValueError("persisted_operations_getter must be callable")
        
        if self.persisted_operations_directory is not None:
            if not isinstance(self.persisted_operations_directory, (str, os.PathLike)):
                raise ValueError("persisted_operations_directory must be a path")
            if not os.fspath(self.persisted_operations_directory):
                raise ValueError("persisted_operations_directory must not be empty")
        
        if self.hash_from_payload is not None and not callable(self.hash_from_payload):
            raise ValueError("hash_from_payload must be callable")
        
        policy = self.allow_unpersisted_operation
        if policy is not None and not isinstance(policy, bool) and not callable(policy):
            raise ValueError(
                f"allow_unpersisted_operation must be a bool or a callable, got {type(policy).__name__}"
            )
    
    def lookup_options_specified(self) -> list[str]:
        """Names of the lookup strategy options that are set."""
        return [name for name in LOOKUP_OPTION_NAMES if getattr(self, name) is not None]


def _str_to_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


def create_options_from_env() -> PersistedOperationsOptions:
    """
    Load options from environment variables.
    
    Environment Variables:
        - PERSISTED_OPERATIONS_DIRECTORY (optional)
        - ALLOW_UNPERSISTED_OPERATIONS (default: false)
    
    Returns:
        A fresh PersistedOperationsOptions on every call. Since resolved
        lookup strategies are cached per options object, call this once at
        startup and keep the result.
    """
    directory = os.getenv("PERSISTED_OPERATIONS_DIRECTORY") or None
    allow = _str_to_bool(os.getenv("ALLOW_UNPERSISTED_OPERATIONS", "false"))
    return PersistedOperationsOptions(
        persisted_operations_directory=directory,
        allow_unpersisted_operation=allow,
    )


def refresh_interval_from_env() -> float:
    """
    Directory rescan interval in seconds.
    
    Reads PERSISTED_OPERATIONS_REFRESH_INTERVAL (default: 5.0).
    
    Raises:
        ValueError: If the value is not a positive number
    """
    value = os.getenv("PERSISTED_OPERATIONS_REFRESH_INTERVAL")
    interval = float(value) if value else DEFAULT_REFRESH_INTERVAL
    if interval <= 0:
        raise ValueError(f"refresh interval must be positive, got {interval}")
    return interval


def load_options(
    config_path: Optional[Union[str, Path]] = None,
    *,
    persisted_operations_directory: Optional[str] = None,
    allow_unpersisted_operations: Optional[bool] = None,
) -> PersistedOperationsOptions:
    """
    Build options from a config file overlaid with CLI flags.
    
    Values from the `options` section of the config file are used unless the
    matching CLI flag is given (not None), in which case the flag wins.
    
    Args:
        config_path: Optional YAML config file
        persisted_operations_directory: --persisted-operations-directory
        allow_unpersisted_operations: --allow-unpersisted-operations
        
    Returns:
        Validated options
        
    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the config file is invalid
    """
    if config_path is not None:
        section = OptionsFile.from_yaml_file(Path(config_path)).options
    else:
        section = OptionsFile().options
    
    merged: dict[str, Any] = section.model_dump()
    if persisted_operations_directory is not None:
        merged["persisted_operations_directory"] = persisted_operations_directory
    if allow_unpersisted_operations is not None:
        merged["allow_unpersisted_operations"] = allow_unpersisted_operations
    
    return PersistedOperationsOptions(
        persisted_operations=merged["persisted_operations"],
        persisted_operations_directory=merged["persisted_operations_directory"],
        allow_unpersisted_operation=merged["allow_unpersisted_operations"],
    )
