"""The built routing table.

A ``Mux`` is what ``RouterNode.build()`` returns: a compiled registry
plus the ordered log of every route key registered into it. It is an
ASGI 3.0 application, so it can be handed straight to an ASGI server::

    mux = root.build()
    mux.print_registered_patterns()
    # uvicorn / hypercorn / pounce: serve ``module:mux``

Read-only after construction; lookups are safe from concurrent requests.
"""

import sys
from typing import TextIO

from muxtree._internal.asgi import Receive, Scope, Send
from muxtree.config import BuilderConfig
from muxtree.routing.pattern import RouteKey
from muxtree.routing.route import Route, RouteMatch
from muxtree.routing.router import Router
from muxtree.server.handler import handle_request

_BANNER_WIDTH = 70


class Mux:
    """A populated, compiled handler registry."""

    __slots__ = ("_registered", "_router", "config")

    def __init__(
        self,
        router: Router,
        registered: tuple[RouteKey, ...] = (),
        *,
        config: BuilderConfig | None = None,
    ) -> None:
        self._router = router
        self._registered = registered
        self.config: BuilderConfig = config or BuilderConfig()

    # -- Lookup --

    @property
    def router(self) -> Router:
        return self._router

    @property
    def routes(self) -> list[Route]:
        """Live registry entries. A duplicate key appears once, with the
        handler that won."""
        return self._router.routes

    def route(self, method: str, path: str) -> RouteMatch:
        """Resolve *method* and *path* to a route and its path parameters.

        Raises ``NotFound`` or ``MethodNotAllowed``.
        """
        return self._router.match(method, path)

    # -- Registration log --

    @property
    def registered_patterns(self) -> tuple[RouteKey, ...]:
        """Every registration made by ``build()``, in order, duplicates included."""
        return self._registered

    def format_registered_patterns(self) -> str:
        """The registration log as a framed block of ``METHOD /path`` lines."""
        title = "* Registered patterns: "
        lines = [title + "*" * (_BANNER_WIDTH - len(title))]
        lines.extend(str(key) for key in self._registered)
        lines.append("*" * _BANNER_WIDTH)
        return "\n".join(lines)

    def print_registered_patterns(self, file: TextIO | None = None) -> None:
        """Print ``format_registered_patterns()`` to *file* (stdout by default)."""
        print(self.format_registered_patterns(), file=file or sys.stdout)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Answers the lifespan protocol (there is nothing to start or stop)
        and closes WebSocket connections, which no route can serve. HTTP
        scopes go to the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] == "websocket":
            # Closing before accept makes the server answer the handshake with 403
            await send({"type": "websocket.close", "code": 1000})
            return

        await handle_request(scope, receive, send, router=self._router, debug=self.config.debug)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    def __len__(self) -> int:
        return len(self._router)

    def __repr__(self) -> str:
        return f"<Mux routes={len(self._router)} registered={len(self._registered)}>"
