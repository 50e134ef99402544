"""
Request payload types and hash extraction.

A GraphQL request payload is normally `{query, variables, operationName,
extensions}`, but with persisted operations it usually carries a hash instead
of `query`. The default extractor understands the Apollo and Relay protocols.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, TypedDict

if TYPE_CHECKING:
    from .options import PersistedOperationsOptions

__all__ = ["RequestPayload", "default_hash_from_payload", "extract_hash"]


class RequestPayload(TypedDict, total=False):
    """
    The commonly seen shapes of a request payload.
    
    Payloads are plain mappings decoded from JSON; this type only documents
    the keys we read.
    """
    # Apollo: https://github.com/apollographql/apollo-link-persisted-queries#protocol
    extensions: dict[str, Any]
    # Relay: https://relay.dev/docs/en/persisted-queries#network-layer-changes
    documentId: str
    # Non-standard
    id: str
    query: Any
    variables: dict[str, Any]
    operationName: str


def _get(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    return None


def default_hash_from_payload(payload: Any) -> Any:
    """
    Extract the hash using the Apollo protocol, then the Relay protocol.
    
    Returns the first truthy value of
    `payload["extensions"]["persistedQuery"]["sha256Hash"]` and
    `payload["documentId"]`, or None. Never raises, whatever the payload's
    shape.
    """
    persisted_query = _get(_get(payload, "extensions"), "persistedQuery")
    return _get(persisted_query, "sha256Hash") or _get(payload, "documentId") or None


def extract_hash(payload: Any, options: Optional[PersistedOperationsOptions] = None) -> Any:
    """
    Extract the operation hash from a payload.
    
    Uses options.hash_from_payload when set, otherwise the default extractor.
    The result is returned as-is: callers treat anything that is not a str
    as "no hash". Exceptions from an override propagate.
    """
    hash_from_payload = None
    if options is not None:
        hash_from_payload = options.hash_from_payload
    if hash_from_payload is None:
        hash_from_payload = default_hash_from_payload
    return hash_from_payload(payload)
