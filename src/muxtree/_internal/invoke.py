"""Invoke helpers — call sync or async handlers uniformly.

Route handlers can be ``def`` or ``async def``. Anything that calls a
user-provided handler goes through this helper so the sync/async check
lives in exactly one place.

Usage::

    from muxtree._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine.

    Works with both sync and async callables::

        def hello(request):
            return "hello"

        async def hello(request):
            name = await lookup(request.path_params["id"])
            return f"hello {name}"
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
