"""Error handling for the request pipeline.

Maps HTTPError exceptions and unexpected failures to Response objects.
"""

import logging

from muxtree.errors import HTTPError
from muxtree.http.request import Request
from muxtree.http.response import Response

logger = logging.getLogger("muxtree.server")


def handle_http_error(exc: HTTPError, request: Request, *, debug: bool) -> Response:
    """Map an HTTPError to a plain-text Response with its status and headers."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    response = Response(body=detail, status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        return Response(body=f"Internal Server Error\n\n{type(exc).__name__}: {exc}", status=500)
    return Response(body="Internal Server Error", status=500)
