"""
Persisted operation error classes.

Provides a clear taxonomy of the ways resolving a persisted operation can
fail. Everything except ConfigurationConflict is caught at the resolver
boundary and turned into an unresolved (None) operation.
"""
from __future__ import annotations


class PersistedOperationError(Exception):
    """
    Base class for all persisted operation errors.
    """
    pass


class ConfigurationConflict(PersistedOperationError):
    """
    More than one lookup strategy was configured.
    
    Raised when two or more of persisted_operations,
    persisted_operations_getter and persisted_operations_directory are set
    on the same options object. This is fatal: it is raised when the options
    are resolved and is never converted into a per-request failure.
    """
    
    def __init__(self, message: str, options_specified: list[str] | None = None):
        super().__init__(message)
        self.options_specified = options_specified or []


class NotConfigured(PersistedOperationError):
    """
    No lookup strategy was configured but a lookup was attempted.
    
    Deferred until a hash actually needs resolving, since a server that
    always bypasses the allowlist never needs a strategy.
    """
    pass


class InvalidHash(PersistedOperationError, ValueError):
    """
    Hash contains characters outside [a-zA-Z0-9_-].
    
    Raised before the hash is used to form a filename.
    """
    
    def __init__(self, message: str, hash: str | None = None):
        super().__init__(message)
        self.hash = hash


class UnknownHash(PersistedOperationError, LookupError):
    """
    Hash is well formed but no operation is registered for it.
    
    Raised when:
    - a directory store's last scan did not see <hash>.graphql
    - a lookup strategy returned no document for the hash
    """
    
    def __init__(self, message: str, hash: str | None = None):
        super().__init__(message)
        self.hash = hash


class NoHashFound(PersistedOperationError):
    """
    The request payload carried no hash and bypass was not allowed.
    """
    pass


__all__ = [
    "PersistedOperationError",
    "ConfigurationConflict",
    "NotConfigured",
    "InvalidHash",
    "UnknownHash",
    "NoHashFound",
]
