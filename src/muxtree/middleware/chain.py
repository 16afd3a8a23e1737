"""Middleware composition.

The order convention is fixed: **the first middleware in a list is the
outermost layer**. For ``[m1, m2]`` the registered handler is
``m1(m2(handler))``, so on an incoming request ``m1`` runs first and sees
the response last. With inherited middleware that means the root's
middleware runs before the node's own.
"""

from collections.abc import Sequence
from functools import wraps

from muxtree._internal.invoke import invoke
from muxtree.http.request import Request
from muxtree.http.response import Response
from muxtree.middleware.protocol import Handler, Middleware, RouteHandler
from muxtree.server.negotiation import negotiate


def as_handler(func: RouteHandler) -> Handler:
    """Adapt a route handler to the uniform ``async (Request) -> Response`` shape.

    Sync and async functions are both accepted; the return value goes
    through ``negotiate()`` so handlers can return plain strings.
    """

    @wraps(func)
    async def handler(request: Request) -> Response:
        return negotiate(await invoke(func, request))

    return handler


def wrap(handler: Handler, middleware: Sequence[Middleware]) -> Handler:
    """Wrap *handler* in *middleware*, first element outermost."""
    for mw in reversed(middleware):
        handler = mw(handler)
    return handler
