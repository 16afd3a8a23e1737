"""Handler registry with trie-based path matching.

This is the registry a router tree is flattened into. Routes are
registered during ``build()`` and the registry is compiled (frozen) once
the whole tree has been visited.
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from muxtree.errors import ConfigurationError, MethodNotAllowed, NotFound
from muxtree.routing.params import CONVERTERS
from muxtree.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"             -> [PathSegment("users")]
        "/users/{id}"        -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}"    -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{rest...}"   -> [..., PathSegment("{rest...}", is_param=True, param_type="path")]

    Raises:
        ConfigurationError: for ``<param>`` segments or unknown converters.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax. "
                f"Path parameters are written as {{param}} or {{param:type}}."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if inner.endswith("..."):
                param_name, param_type = inner[:-3], "path"
            elif ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name, param_type = inner, "str"
            if param_type not in CONVERTERS:
                msg = (
                    f"Route {path!r} uses unknown converter {param_type!r}. "
                    f"Available: {', '.join(sorted(CONVERTERS))}."
                )
                raise ConfigurationError(msg)
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


def _shape(segments: list[PathSegment]) -> str:
    """Path with parameter names erased — two routes with the same shape
    occupy the same trie leaf."""
    return "/" + "/".join(
        f"{{:{seg.param_type}}}" if seg.is_param else seg.value for seg in segments
    )


def route_slot(method: str, path: str) -> tuple[str, str]:
    """The registry slot *method* and *path* occupy.

    Parameter names are erased and surrounding slashes ignored, so
    ``("GET", "/u/{id}")`` and ``("GET", "/u/{name}/")`` share a slot.
    Registering into an occupied slot replaces what was there.
    """
    return method.upper(), _shape(parse_path(path))


@dataclass(slots=True)
class _Leaf:
    """A route stored at a trie node, with the names of its parameters in
    path order."""

    route: Route
    param_names: tuple[str, ...]


class _TrieNode:
    """A node in the route trie. Mutable until the registry is compiled."""

    __slots__ = ("catch_all", "children", "param_edges", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Parameter children keyed by converter type, tried in insertion order
        self.param_edges: dict[str, _ParamEdge] = {}
        # Catch-all routes ({rest...} / {rest:path}) keyed by method
        self.catch_all: dict[str, _Leaf] = {}
        # Routes ending at this node, keyed by HTTP method
        self.routes_by_method: dict[str, _Leaf] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    regex: re.Pattern[str]
    node: _TrieNode


class Router:
    """Handler registry with trie-based path matching.

    Usage::

        router = Router()
        router.register("GET", "/users/{id:int}", handler)
        router.compile()
        match = router.match("GET", "/users/42")

    Registering the same method and path shape twice replaces the earlier
    handler (last write wins).
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: dict[tuple[str, str], Route] = {}
        self._compiled = False

    def register(
        self,
        method: str,
        path: str,
        handler: Callable[..., Any],
        *,
        source: Callable[..., Any] | None = None,
    ) -> Route:
        """Register *handler* for *method* and *path*. Returns the new Route."""
        route = Route(method=method.upper(), path=path, handler=handler, source=source)
        self.add(route)
        return route

    def add(self, route: Route) -> None:
        """Add a route to the registry. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        leaf = _Leaf(
            route=route,
            param_names=tuple(seg.param_name or "" for seg in segments if seg.is_param),
        )
        node = self._root

        for seg in segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes the rest of the path, must be last
                node.catch_all[route.method] = leaf
                break
            if seg.is_param:
                edge = node.param_edges.get(seg.param_type)
                if edge is None:
                    pattern = CONVERTERS[seg.param_type]
                    edge = _ParamEdge(regex=re.compile(f"^{pattern}$"), node=_TrieNode())
                    node.param_edges[seg.param_type] = edge
                node = edge.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        else:
            node.routes_by_method[route.method] = leaf

        key = (route.method, _shape(segments))
        self._routes.pop(key, None)
        self._routes[key] = route

    @property
    def routes(self) -> list[Route]:
        """All live routes, in the order they were (last) registered."""
        return list(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def compile(self) -> None:
        """Freeze the registry. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def route(self, method: str, path: str) -> Callable[..., Any]:
        """Return the handler registered for *method* and *path*.

        Same errors as ``match()``.
        """
        return self.match(method, path).route.handler

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against the registry.

        Candidates are tried most specific first (static segments, then
        parameters, then catch-alls); the first one registered for
        *method* wins.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if routes match the path but none of
        them accepts the method.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        method = method.upper()
        allowed: set[str] = set()

        for leaves, values in self._candidates(self._root, parts, 0, ()):
            leaf = leaves.get(method)
            if leaf is None and method == "HEAD":
                # HEAD is served by the GET handler; the sender drops the body
                leaf = leaves.get("GET")
            if leaf is not None:
                return RouteMatch(
                    route=leaf.route, path_params=dict(zip(leaf.param_names, values))
                )
            allowed.update(leaves)

        if not allowed:
            raise NotFound(f"No route matches {method} {path!r}")
        raise MethodNotAllowed(frozenset(allowed))

    def _candidates(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        values: tuple[str, ...],
    ) -> Iterator[tuple[dict[str, _Leaf], tuple[str, ...]]]:
        """Yield every route set matching the path, most specific first."""
        # All parts consumed
        if index == len(parts):
            if node.routes_by_method:
                yield node.routes_by_method, values
            # A catch-all also matches an empty remainder
            if node.catch_all:
                yield node.catch_all, (*values, "")
            return

        part = parts[index]

        # 1. Static child first (exact match)
        child = node.children.get(part)
        if child is not None:
            yield from self._candidates(child, parts, index + 1, values)

        # 2. Parameter children, in the order their converters were first used
        for edge in node.param_edges.values():
            if edge.regex.match(part):
                yield from self._candidates(edge.node, parts, index + 1, (*values, part))

        # 3. Catch-all
        if node.catch_all:
            yield node.catch_all, (*values, "/".join(parts[index:]))

    def __repr__(self) -> str:
        return f"<Router routes={len(self._routes)} compiled={self._compiled}>"
