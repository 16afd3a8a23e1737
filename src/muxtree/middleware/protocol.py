"""Handler and Middleware types.

A handler is an async callable taking the request and returning a
response. A middleware takes a handler and returns the handler that
wraps it::

    def timing(next: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

        return handler

No base class required. The builder checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from muxtree.http.request import Request
from muxtree.http.response import Response

# What a router node's patterns map to — def or async def, returning a
# Response or anything negotiate() understands
RouteHandler: TypeAlias = Callable[[Request], Any]

# The uniform shape every registered handler has after wrapping
Handler: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for muxtree middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def tag(next: Handler) -> Handler:
            async def handler(request: Request) -> Response:
                response = await next(request)
                return response.with_body("tag:" + response.text)

            return handler

        # Class middleware
        class RequireHeader:
            def __init__(self, name: str) -> None:
                self.name = name

            def __call__(self, next: Handler) -> Handler: ...
    """

    def __call__(self, next: Handler, /) -> Handler: ...
