"""
Transport adapters.

Thin glue between a hosting GraphQL server's transports and
PersistedOperations. Each adapter ALWAYS overwrites the document the server
will execute, even with None: a None document must make execution fail with
an error, never fall back to whatever the client sent.
"""
from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional, Sequence

from graphql import GraphQLError, parse

from .resolver import PersistedOperations

logger = logging.getLogger(__name__)

__all__ = ["process_http_params_list", "process_ws_operation", "process_ws_subscribe"]


def process_http_params_list(
    params_list: Sequence[MutableMapping[str, Any]],
    operations: PersistedOperations,
    request: Any,
) -> Sequence[MutableMapping[str, Any]]:
    """
    Resolve every operation of a (possibly batched) HTTP request.
    
    Args:
        params_list: Decoded request payloads; updated in place
        operations: Persisted operations for this server
        request: The HTTP request, passed to the bypass policy
        
    Returns:
        params_list, with each `query` replaced by the resolved document or None
    """
    for params in params_list:
        params["query"] = operations.resolve(params, request)
    return params_list


def process_ws_operation(
    params: MutableMapping[str, Any],
    message: MutableMapping[str, Any],
    operations: PersistedOperations,
    request: Any = None,
) -> MutableMapping[str, Any]:
    """
    Resolve an operation from the legacy subscriptions-transport-ws protocol.
    
    Args:
        params: Execution params the server will run; `query` is overwritten
        message: The websocket message; its `payload` is the request payload
        operations: Persisted operations for this server
        request: The HTTP upgrade request, or None if the socket has none
    """
    params["query"] = operations.resolve(message.get("payload"), request)
    return params


def process_ws_subscribe(
    params: MutableMapping[str, Any],
    message: MutableMapping[str, Any],
    operations: PersistedOperations,
    request: Any = None,
) -> MutableMapping[str, Any]:
    """
    Resolve an operation from the graphql-ws protocol.
    
    This protocol executes a parsed document, so the resolved text is parsed
    here. Unresolved or unparseable operations set `document` to None.
    
    Args:
        params: Execution params the server will run; `document` is overwritten
        message: The Subscribe message; its `payload` is the request payload
        operations: Persisted operations for this server
        request: The HTTP upgrade request, or None if the socket has none
    """
    query = operations.resolve(message.get("payload"), request)
    document: Optional[Any] = None
    if query:
        try:
            document = parse(query)
        except GraphQLError as e:
            logger.error(f"Failed to parse persisted operation: {e}")
    params["document"] = document
    return params
