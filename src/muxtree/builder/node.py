"""Router nodes — the tree a routing table is assembled from.

Every node of a tree lives in one arena (``_Tree``) and is addressed by
its creation-order index. A ``RouterNode`` is a handle onto one slot of
that arena: parent, root, and children are looked up by index, so nodes
never reference each other directly and no node lists itself as a child.

Prefix resolution
-----------------
A node's effective prefix is the concatenation of every ancestor's local
prefix fragment followed by its own, in root-to-node order, normalized.
It is recomputed from the current tree every time the node registers
patterns. Entries keep the prefix that was in effect when they were
registered; changing a prefix later only affects later registrations::

    root = RouterNode()
    api = root.subrouter()      # created before any prefix is set
    root.prefix("/a")
    api.prefix("/b")
    api.handle("GET /x", h)     # registered as GET /a/b/x

Middleware inheritance
----------------------
A subrouter starts with a copy of the *root's* middleware list as it is
at creation time. ``use()`` appends to the node's own list after that
snapshot. Middleware added to the root later, or to an intermediate
parent, does not reach nodes that already exist.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from muxtree.config import BuilderConfig
from muxtree.errors import ConfigurationError, MalformedPattern
from muxtree.middleware.protocol import Middleware, RouteHandler
from muxtree.routing.normalize import join_prefixes, normalize_prefix
from muxtree.routing.pattern import RouteKey, parse_pattern
from muxtree.routing.router import parse_path

if TYPE_CHECKING:
    from muxtree.mux import Mux

logger = logging.getLogger("muxtree.builder")

_ROOT = 0


@dataclass(slots=True)
class _NodeState:
    """Arena slot for one router node."""

    parent: int
    prefix: str = ""
    patterns: dict[RouteKey, RouteHandler] = field(default_factory=dict)
    middleware: list[Middleware] = field(default_factory=list)
    children: list[int] = field(default_factory=list)


class _Tree:
    """Arena owning every node of one router tree."""

    __slots__ = ("config", "nodes")

    def __init__(self, config: BuilderConfig) -> None:
        self.config = config
        self.nodes: list[_NodeState] = [_NodeState(parent=_ROOT)]

    def add_child(self, parent: int) -> int:
        index = len(self.nodes)
        state = _NodeState(parent=parent, middleware=list(self.nodes[_ROOT].middleware))
        self.nodes.append(state)
        self.nodes[parent].children.append(index)
        return index

    def ancestry(self, index: int) -> Iterator[int]:
        """Yield *index* and each ancestor up to and including the root."""
        while True:
            yield index
            if index == _ROOT:
                return
            index = self.nodes[index].parent


class RouterNode:
    """A node of a router tree.

    ``RouterNode()`` creates a new tree and returns its root; every other
    node is derived with ``subrouter()``. Call ``build()`` on any node to
    flatten the whole tree into a ``Mux``::

        root = RouterNode()
        root.use(log_requests)
        root.prefix("/api")

        users = root.subrouter().prefix("/users")
        users.register_patterns({
            "GET /": list_users,
            "GET /{id:int}": get_user,
            "POST /": create_user,
        })

        mux = root.build()
    """

    __slots__ = ("_index", "_tree")

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self._tree = _Tree(config or BuilderConfig())
        self._index = _ROOT

    @classmethod
    def _at(cls, tree: _Tree, index: int) -> RouterNode:
        node = object.__new__(cls)
        node._tree = tree
        node._index = index
        return node

    @property
    def _state(self) -> _NodeState:
        return self._tree.nodes[self._index]

    # -- Structure --

    @property
    def config(self) -> BuilderConfig:
        """Configuration shared by the whole tree."""
        return self._tree.config

    @property
    def index(self) -> int:
        """Creation-order position of this node in its tree (root is 0)."""
        return self._index

    @property
    def is_root(self) -> bool:
        return self._index == _ROOT

    @property
    def root(self) -> RouterNode:
        """The tree's root. The root's root is itself."""
        return RouterNode._at(self._tree, _ROOT)

    @property
    def parent(self) -> RouterNode:
        """The immediate ancestor. The root's parent is itself."""
        return RouterNode._at(self._tree, self._state.parent)

    @property
    def children(self) -> tuple[RouterNode, ...]:
        """Direct subrouters, in creation order."""
        return tuple(RouterNode._at(self._tree, i) for i in self._state.children)

    def subrouter(self) -> RouterNode:
        """Create a child node.

        The child shares this node's tree and starts with a snapshot of the
        root's middleware.
        """
        return RouterNode._at(self._tree, self._tree.add_child(self._index))

    # -- Prefix --

    def prefix(self, text: str) -> RouterNode:
        """Set this node's local prefix fragment and return the node.

        A leading ``/`` is added when missing. Setting the prefix again
        replaces the previous fragment.

        Raises:
            MalformedPattern: the fragment holds a segment the registry
                would reject (``<param>``, unknown converter).
        """
        fragment = normalize_prefix(text)
        try:
            parse_path(fragment)
        except ConfigurationError as exc:
            raise MalformedPattern(text, str(exc)) from exc
        self._state.prefix = fragment
        return self

    @property
    def local_prefix(self) -> str:
        """The fragment set with ``prefix()``, empty by default."""
        return self._state.prefix

    @property
    def effective_prefix(self) -> str:
        """Root-to-node concatenation of local prefixes, normalized."""
        nodes = self._tree.nodes
        fragments = [nodes[i].prefix for i in self._tree.ancestry(self._index)]
        return join_prefixes(*reversed(fragments))

    # -- Middleware --

    def use(self, *middleware: Middleware) -> RouterNode:
        """Append middleware to this node and return the node."""
        self._state.middleware.extend(middleware)
        return self

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Inherited snapshot followed by the node's own middleware."""
        return tuple(self._state.middleware)

    # -- Patterns --

    def register_patterns(self, patterns: Mapping[str | RouteKey, RouteHandler]) -> None:
        """Register handlers under this node's effective prefix.

        Keys are ``"METHOD /path"``, ``"/path"`` (method defaults to
        ``config.default_method``) or ``RouteKey`` instances. A key that
        resolves to one already stored on this node replaces it.

        Raises:
            MalformedPattern: a key cannot be parsed, or its path uses
                segment syntax the registry rejects. Nothing is stored.
        """
        effective = self.effective_prefix
        default_method = self._tree.config.default_method
        resolved: dict[RouteKey, RouteHandler] = {}
        for pattern, handler in patterns.items():
            key = parse_pattern(pattern, default_method=default_method)
            resolved[RouteKey(key.method, join_prefixes(effective, key.path))] = handler

        # Nothing is stored if any key is malformed
        self._state.patterns.update(resolved)
        if self._tree.config.log_registrations:
            for key in resolved:
                logger.debug("node %d pattern %s", self._index, key)

    def handle(self, pattern: str | RouteKey, handler: RouteHandler) -> None:
        """Register a single handler. Same rules as ``register_patterns``."""
        self.register_patterns({pattern: handler})

    def route(self, pattern: str | RouteKey) -> Callable[[RouteHandler], RouteHandler]:
        """Decorator form of ``handle()``::

            @api.route("GET /users/{id}")
            async def get_user(request):
                ...
        """

        def decorator(handler: RouteHandler) -> RouteHandler:
            self.handle(pattern, handler)
            return handler

        return decorator

    @property
    def patterns(self) -> Mapping[RouteKey, RouteHandler]:
        """Read-only view of the resolved route keys stored on this node."""
        return MappingProxyType(self._state.patterns)

    # -- Build --

    def walk(self) -> Iterator[RouterNode]:
        """Every node of the tree, breadth-first from the root."""
        from muxtree.builder.build import iter_breadth_first

        return iter_breadth_first(self)

    def build(self) -> Mux:
        """Flatten the whole tree (always from the root) into a ``Mux``."""
        from muxtree.builder.build import build_tree

        return build_tree(self)

    # -- Identity --

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RouterNode):
            return NotImplemented
        return self._tree is other._tree and self._index == other._index

    def __hash__(self) -> int:
        return hash((id(self._tree), self._index))

    def __repr__(self) -> str:
        state = self._state
        return (
            f"<RouterNode #{self._index} prefix={state.prefix!r} "
            f"patterns={len(state.patterns)} children={len(state.children)}>"
        )
