"""ASGI handler — translates ASGI scope/messages to muxtree types.

The only component that touches raw ASGI directly. Converts the scope to
a Request, dispatches it through the registry (whose handlers already
carry their middleware), and sends the Response back through send().
"""

from muxtree._internal.asgi import Receive, Scope, Send
from muxtree.errors import HTTPError
from muxtree.http.request import Request
from muxtree.routing.router import Router
from muxtree.server.errors import handle_http_error, handle_internal_error
from muxtree.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the built routing table."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        match = router.match(request.method, request.path)
        response = await match.route.handler(request.with_path_params(match.path_params))
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug=debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug=debug)

    await send_response(response, send, head=request.method == "HEAD")
