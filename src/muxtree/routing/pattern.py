"""Route keys and the ``"METHOD /path"`` pattern adapter.

A route key is the structured form of a registration: an HTTP method plus
a path. The string form is accepted at the builder boundary for
convenience and parsed here; anything that doesn't split cleanly raises
``MalformedPattern`` instead of being guessed at.
"""

from dataclasses import dataclass

from muxtree.errors import ConfigurationError, MalformedPattern
from muxtree.routing.router import parse_path


@dataclass(frozen=True, slots=True)
class RouteKey:
    """An (HTTP method, path) pair identifying a single registration."""

    method: str
    path: str

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


def parse_pattern(pattern: str | RouteKey, *, default_method: str = "GET") -> RouteKey:
    """Parse ``"METHOD /path"`` or ``"/path"`` into a ``RouteKey``.

    Examples::

        "GET /users/{id}"  -> RouteKey("GET", "/users/{id}")
        "post /users"      -> RouteKey("POST", "/users")
        "/health"          -> RouteKey(default_method, "/health")

    The path is checked against the registry's segment syntax here, so a
    bad ``{param}`` is reported by the call that registered it.

    Raises:
        MalformedPattern: empty pattern, more than two tokens, a path that
            does not start with ``/``, or a path the registry would reject
            (``<param>`` segments, unknown converters).
    """
    if isinstance(pattern, RouteKey):
        method, path = pattern.method, pattern.path
    else:
        tokens = pattern.split()
        match tokens:
            case [path]:
                method = default_method
            case [method, path]:
                pass
            case []:
                raise MalformedPattern(pattern, "pattern is empty")
            case _:
                raise MalformedPattern(
                    pattern, f"expected 'METHOD /path' or '/path', got {len(tokens)} tokens"
                )

    if not path.startswith("/"):
        raise MalformedPattern(str(pattern), "path must start with '/'")
    if not method.isalpha():
        raise MalformedPattern(str(pattern), f"method {method!r} is not a valid HTTP method")
    try:
        parse_path(path)
    except ConfigurationError as exc:
        raise MalformedPattern(str(pattern), str(exc)) from exc

    return RouteKey(method.upper(), path)
