"""Immutable description of one REST call.

Services compose endpoints fluently::

    Endpoint(HTTPMethod.GET, "Boards/search").with_query("keyword", kw).auth(True)

Every builder returns a new descriptor; the receiver is never changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def _frozen(mapping: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Endpoint:
    """Method, path, query, headers, body and auth requirement of a call.

    ``query`` values may be ``None``; such parameters are left out of the
    request entirely.
    """

    method: HTTPMethod
    path: str
    query: Mapping[str, str | None] = field(default_factory=_frozen)
    headers: Mapping[str, str] = field(default_factory=_frozen)
    body: Any = None
    requires_auth: bool = True

    def __post_init__(self) -> None:
        # Callers may pass plain dicts; keep the instance unshareable-by-mutation
        if not isinstance(self.query, MappingProxyType):
            object.__setattr__(self, "query", _frozen(self.query))
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", _frozen(self.headers))

    def with_body(self, body: Any) -> Endpoint:
        return replace(self, body=body)

    def with_query(self, key: str, value: str | None) -> Endpoint:
        return replace(self, query=_frozen({**self.query, key: value}))

    def with_header(self, name: str, value: str) -> Endpoint:
        return replace(self, headers=_frozen({**self.headers, name: value}))

    def auth(self, enabled: bool) -> Endpoint:
        """Toggle whether this endpoint sends the access token."""
        return replace(self, requires_auth=enabled)

    def present_query(self) -> dict[str, str]:
        """Query parameters with absent values dropped."""
        return {k: v for k, v in self.query.items() if v is not None}
