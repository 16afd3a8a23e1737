"""Routing — path normalization, route keys, and the handler registry.

Router nodes resolve and normalize their patterns here; ``build()``
flattens the tree into a ``Router`` which is compiled before serving.
"""

from muxtree.routing.normalize import join_prefixes, normalize_path, normalize_prefix
from muxtree.routing.pattern import RouteKey, parse_pattern
from muxtree.routing.route import Route, RouteMatch
from muxtree.routing.router import Router

__all__ = [
    "Route",
    "RouteKey",
    "RouteMatch",
    "Router",
    "join_prefixes",
    "normalize_path",
    "normalize_prefix",
    "parse_pattern",
]
