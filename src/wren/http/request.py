"""Immutable HTTP request.

Frozen metadata built from the ASGI scope. Documentation pages are
read-only GET targets, so the body is never consumed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from wren.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path_params`` is empty until the router attaches the parameters
    captured for the matched route (see :meth:`with_path_params`).
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query_string: str = ""
    path_params: dict[str, str] = field(default_factory=dict)
    client: tuple[str, int] | None = None

    @property
    def url(self) -> str:
        """Request path plus query string, as the client sent it."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the parameters captured by the router."""
        return replace(self, path_params=path_params)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            client=tuple(client) if client else None,
        )
