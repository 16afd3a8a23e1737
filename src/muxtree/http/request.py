"""Immutable HTTP request.

Frozen metadata with async body access. Handlers registered in a router
tree receive one of these as their only argument.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from muxtree._internal.asgi import Receive, Scope
from muxtree.http.headers import Headers
from muxtree.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path_params`` holds the values captured by ``{name}`` segments of the
    matched pattern. Body is accessed via ``.body()``, ``.text()``,
    ``.json()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: body cache (the dict is mutable, the field reference is not)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the parameters of a route match."""
        return replace(self, path_params=path_params)

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive is consumed once; later calls return the cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            _receive=receive,
        )
