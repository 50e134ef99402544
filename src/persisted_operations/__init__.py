"""
Persisted operations (operation allowlist) for GraphQL servers.

Clients reference pre-approved operations by hash instead of sending query
text; this package resolves those hashes to documents.
"""
from .errors import (
    ConfigurationConflict,
    InvalidHash,
    NoHashFound,
    NotConfigured,
    PersistedOperationError,
    UnknownHash,
)
from .options import PersistedOperationsOptions, create_options_from_env, load_options
from .payload import RequestPayload, default_hash_from_payload
from .registry import OperationRegistry
from .resolver import PersistedOperations, persisted_operation_from_payload

__all__ = [
    "ConfigurationConflict",
    "InvalidHash",
    "NoHashFound",
    "NotConfigured",
    "PersistedOperationError",
    "UnknownHash",
    "PersistedOperationsOptions",
    "create_options_from_env",
    "load_options",
    "RequestPayload",
    "default_hash_from_payload",
    "OperationRegistry",
    "PersistedOperations",
    "persisted_operation_from_payload",
]
