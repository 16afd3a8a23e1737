"""Middleware — handler-wrapping callables, no inheritance required.

A middleware is any callable matching:
    def mw(next: Handler) -> Handler

Lists of middleware compose with the first element outermost; see
``muxtree.middleware.chain``.
"""

from muxtree.middleware.chain import as_handler, wrap
from muxtree.middleware.protocol import Handler, Middleware, RouteHandler

__all__ = [
    "Handler",
    "Middleware",
    "RouteHandler",
    "as_handler",
    "wrap",
]
