"""
Unpersisted operation bypass policy.

Decides, per request, whether a client may send a literal query instead of a
persisted operation hash (e.g. GraphiQL in development, or admin users in
production).
"""
from __future__ import annotations

import logging
from typing import Any

from .options import PersistedOperationsOptions

logger = logging.getLogger(__name__)

__all__ = ["should_allow_unpersisted_operation"]


def should_allow_unpersisted_operation(
    options: PersistedOperationsOptions,
    request: Any,
    payload: Any,
) -> bool:
    """
    Evaluate the bypass policy for one request.
    
    Args:
        options: Persisted operations options
        request: Transport-level request (e.g. the HTTP request object), or
            None when the transport has no request to offer
        payload: The GraphQL request payload
        
    Returns:
        The policy itself when it is a bool; the predicate's result when it is
        callable; False when unset or when the predicate raises.
    """
    policy = options.allow_unpersisted_operation
    if callable(policy):
        try:
            return bool(policy(request, payload))
        except Exception as e:
            logger.warning(f"allow_unpersisted_operation raised, not bypassing persisted operations: {e}", exc_info=True)
            return False
    return bool(policy)
