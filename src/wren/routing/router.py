"""Trie-based router with a wildcard static-file fallback.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. Registering the same path and
method twice is not an error: the later route replaces the earlier one.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.errors import MethodNotAllowed, NotFound
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("wren.server")

# Regex for each supported parameter type
_PARAM_PATTERNS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "path": r".+",
}


def parse_path(path: str, *, literal: bool = False) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/docs"               -> [PathSegment("docs")]
        "docs/guides/setup"   -> [PathSegment("docs"), PathSegment("guides"), PathSegment("setup")]
        "/files/{path:path}"  -> [PathSegment("files"), PathSegment("{path:path}", is_param=True, ...)]

    Leading and trailing slashes are ignored, so page paths (which have
    none) and URL paths (which start with ``/``) parse the same way.
    With *literal*, braces carry no meaning and every part is static.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if not literal and part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            param_name, _, param_type = inner.partition(":")
            param_type = param_type or "str"
            if param_type not in _PARAM_PATTERNS:
                msg = f"Unknown parameter type {param_type!r} in route {path!r}."
                raise ValueError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during setup only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.param_child: _ParamEdge | None = None
        self.catch_all: _CatchAllEdge | None = None
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """Consumes the remaining path."""

    param_name: str
    routes_by_method: dict[str, Route]


class Router:
    """Trie-based router.

    Usage::

        router = Router()
        router.get("/docs", handler)
        router.static_handler = resolve_static
        router.compile()
        response = await router.match_route(request)

    Handlers are called as ``handler(request, path_params)`` and return a
    :class:`~wren.http.response.Response`.

    ``static_handler``, when set, is the wildcard fallback: it receives
    ``{"path": <relative path>}`` for any GET request no explicit route
    matches, and returns a Response or ``None``.
    """

    __slots__ = ("_compiled", "_root", "static_handler")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self.static_handler: Handler | None = None

    @property
    def compiled(self) -> bool:
        return self._compiled

    def get(
        self,
        path: str,
        handler: Callable[..., Any],
        *,
        name: str | None = None,
        literal: bool = False,
    ) -> Route:
        """Register a GET route. Shorthand for :meth:`add`.

        A *literal* route matches its path exactly; ``{...}`` parts are
        not parameters.
        """
        route = Route(
            path=path,
            handler=handler,
            methods=frozenset({"GET"}),
            name=name,
            literal=literal,
        )
        self.add(route)
        return route

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path, literal=route.literal):
            if seg.is_param and seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path",
                        routes_by_method={},
                    )
                for method in route.methods:
                    node.catch_all.routes_by_method[method] = route
                return

            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        regex=re.compile(f"^{_PARAM_PATTERNS[seg.param_type]}$"),
                        node=_TrieNode(),
                    )
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            if method in node.routes_by_method:
                logger.debug("Route %s %s replaces an earlier registration", method, route.path)
            node.routes_by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """Every registered route still reachable in the trie, depth-first."""
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        candidates = list(node.routes_by_method.values())
        if node.catch_all is not None:
            candidates.extend(node.catch_all.routes_by_method.values())
        for route in candidates:
            if id(route) not in seen:
                seen.add(id(route))
                result.append(route)

        for child in node.children.values():
            self._collect_routes(child, seen, result)

        if node.param_child is not None:
            self._collect_routes(node.param_child.node, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against registered routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        routes_by_method, params = result
        if method in routes_by_method:
            return RouteMatch(route=routes_by_method[method], path_params=params)
        # HEAD is answered by the GET handler
        if method == "HEAD" and "GET" in routes_by_method:
            return RouteMatch(route=routes_by_method["GET"], path_params=params)

        raise MethodNotAllowed(frozenset(routes_by_method))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        """Recursively match path parts: static first, then param, then catch-all."""
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            result = self._match_node(
                edge.node, parts, index + 1, {**params, edge.param_name: part}
            )
            if result is not None:
                return result

        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.routes_by_method, {
                **params,
                node.catch_all.param_name: remaining,
            }

        return None

    async def match_route(self, request: Request) -> Response | None:
        """Resolve a request to a response payload.

        Explicit routes win. When none matches, GET and HEAD requests fall
        back to ``static_handler``. Returns ``None`` when nothing matches.
        ``MethodNotAllowed`` propagates to the caller.
        """
        try:
            match = self.match(request.method, request.path)
        except NotFound:
            if self.static_handler is None or request.method not in ("GET", "HEAD"):
                return None
            params = {"path": request.path.lstrip("/")}
            return await invoke(self.static_handler, request.with_path_params(params), params)

        request = request.with_path_params(match.path_params)
        return await invoke(match.route.handler, request, match.path_params)
