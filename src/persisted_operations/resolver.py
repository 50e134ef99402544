"""
Persisted operation resolution.

This module implements the single entry point used by transport adapters:
given a request payload, return the operation document to execute, or None
when no acceptable operation could be found.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from .bypass import should_allow_unpersisted_operation
from .errors import ConfigurationConflict, NoHashFound, UnknownHash
from .options import PersistedOperationsOptions
from .payload import extract_hash
from .registry import OperationRegistry

logger = logging.getLogger(__name__)

__all__ = ["operation_from_payload", "persisted_operation_from_payload", "PersistedOperations"]


def operation_from_payload(
    payload: Any,
    options: PersistedOperationsOptions,
    allow_unpersisted_operation: bool,
    *,
    registry: OperationRegistry,
) -> str:
    """
    Resolve the operation document for a request payload, raising on failure.
    
    Steps:
    1. Extract the hash (options.hash_from_payload or the default extractor)
    2. No str hash: return payload["query"] verbatim if bypass is allowed and
       it is a str; otherwise fail
    3. Look the hash up with the getter resolved for these options
    
    The returned query in the bypass case is untrusted client input.
    
    Raises:
        NoHashFound: If there is no hash and bypass does not apply
        UnknownHash: If the lookup strategy has no document for the hash
        InvalidHash: If the lookup strategy rejects the hash format
        NotConfigured: If no lookup strategy is configured
        ConfigurationConflict: If options set more than one lookup strategy
        Exception: Anything raised by a caller-supplied extractor or getter
    """
    hash = extract_hash(payload, options)
    if not isinstance(hash, str):
        query = payload.get("query") if isinstance(payload, Mapping) else None
        if allow_unpersisted_operation and isinstance(query, str):
            return query
        raise NoHashFound("We could not find a persisted operation hash string in the request.")
    
    getter = registry.getter_for(options)
    operation = getter(hash)
    if not isinstance(operation, str):
        raise UnknownHash(f"No persisted operation found for hash '{hash}'", hash=hash)
    return operation


def persisted_operation_from_payload(
    payload: Any,
    options: PersistedOperationsOptions,
    allow_unpersisted_operation: bool,
    *,
    registry: OperationRegistry,
) -> Optional[str]:
    """
    Resolve the operation document for a request payload. Never raises for
    request-level failures.
    
    Failures are logged with the payload and converted to None; the caller
    must surface None as an error at execution time, never execute nothing
    silently.
    
    Args:
        payload: GraphQL request payload
        options: Persisted operations options
        allow_unpersisted_operation: Result of the bypass policy for this request
        registry: Registry holding resolved getters
        
    Returns:
        Operation document, or None
        
    Raises:
        ConfigurationConflict: If options set more than one lookup strategy.
            This is a server misconfiguration, not a request failure.
    """
    try:
        return operation_from_payload(
            payload, options, allow_unpersisted_operation, registry=registry
        )
    except ConfigurationConflict:
        raise
    except Exception as e:
        logger.error(f"Failed to get persisted operation from payload {payload!r}: {e}", exc_info=True)
        return None


class PersistedOperations:
    """
    Persisted operations bound to one options object and registry.
    
    This is what a hosting server hands to its transport adapters. It is
    stateless apart from the injected options and registry, so one instance
    can serve every request.
    """
    
    def __init__(self, options: PersistedOperationsOptions, registry: Optional[OperationRegistry] = None):
        """
        Initialize the facade.
        
        Args:
            options: Persisted operations options
            registry: Registry to cache resolved getters in (a new one if None)
        """
        self.options = options
        self.registry = registry if registry is not None else OperationRegistry()
    
    def prepare(self) -> None:
        """Resolve options eagerly; call from server startup."""
        self.registry.prepare(self.options)
    
    def allow_unpersisted(self, request: Any, payload: Any) -> bool:
        return should_allow_unpersisted_operation(self.options, request, payload)
    
    def resolve(self, payload: Any, request: Any = None) -> Optional[str]:
        """
        Evaluate the bypass policy and resolve the payload's operation.
        
        Args:
            payload: GraphQL request payload
            request: Transport-level request, or None if unavailable
            
        Returns:
            Operation document, or None
        """
        return persisted_operation_from_payload(
            payload,
            self.options,
            self.allow_unpersisted(request, payload),
            registry=self.registry,
        )
    
    def resolve_or_raise(self, payload: Any, request: Any = None) -> str:
        """Like resolve(), but raise the underlying failure instead of returning None."""
        return operation_from_payload(
            payload,
            self.options,
            self.allow_unpersisted(request, payload),
            registry=self.registry,
        )
