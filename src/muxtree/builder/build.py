"""Tree flattening — turns a router tree into one populated registry.

``build_tree`` visits every node of the tree exactly once, breadth-first
from the root, and registers each node's patterns into a fresh
``Router``, every handler wrapped in that node's middleware. The order
of registrations is the breadth-first node order, and within a node the
order patterns were registered in.
"""

import logging
from collections import deque
from collections.abc import Iterator

from muxtree.builder.node import RouterNode
from muxtree.config import BuilderConfig
from muxtree.errors import DuplicateRoute
from muxtree.middleware.chain import as_handler, wrap
from muxtree.mux import Mux
from muxtree.routing.pattern import RouteKey
from muxtree.routing.router import Router, route_slot

logger = logging.getLogger("muxtree.builder")


def iter_breadth_first(node: RouterNode) -> Iterator[RouterNode]:
    """Yield every node of *node*'s tree once, breadth-first from the root."""
    queue: deque[RouterNode] = deque([node.root])
    visited: set[int] = set()

    while queue:
        current = queue.popleft()
        if current.index in visited:
            continue
        visited.add(current.index)
        yield current
        queue.extend(current.children)


def _check_duplicate(
    config: BuilderConfig,
    key: RouteKey,
    current: RouterNode,
    previous: tuple[RouteKey, RouterNode],
) -> None:
    if config.duplicates == "error":
        raise DuplicateRoute(key, previous[0])
    if config.duplicates == "warn":
        logger.warning(
            "%s from router #%d replaces %s from router #%d",
            key,
            current.index,
            previous[0],
            previous[1].index,
        )


def build_tree(node: RouterNode) -> Mux:
    """Flatten the tree containing *node* into a ``Mux``.

    Always starts from the root, whichever node it is given. The tree is
    left untouched, so building again yields an independent ``Mux``.

    Two registrations collide when they land in the same registry slot:
    same method, same path once parameter names and surrounding slashes
    are ignored (``GET /u/{id}`` and ``GET /u/{name}/``).

    Raises:
        DuplicateRoute: two registrations collide and the tree's config
            says ``duplicates="error"``.
    """
    config = node.config
    router = Router()
    registered: list[RouteKey] = []
    owners: dict[tuple[str, str], tuple[RouteKey, RouterNode]] = {}
    node_count = 0

    for current in iter_breadth_first(node):
        node_count += 1
        middleware = current.middleware
        for key, func in current.patterns.items():
            slot = route_slot(key.method, key.path)
            previous = owners.get(slot)
            if previous is not None:
                _check_duplicate(config, key, current, previous)
            owners[slot] = (key, current)

            router.register(key.method, key.path, wrap(as_handler(func), middleware), source=func)
            registered.append(key)
            if config.log_registrations:
                logger.debug("register %s %s", key.method, key.path)

    router.compile()
    logger.debug("built %d routes from %d routers", len(registered), node_count)
    return Mux(router, tuple(registered), config=config)
