"""muxtree exception hierarchy.

Shared across the builder, registry, and ASGI pipeline so every module
raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class MuxtreeError(Exception):
    """Base for all muxtree-specific errors."""


class ConfigurationError(MuxtreeError):
    """Raised when the router tree is assembled incorrectly.

    Typically surfaces while registering patterns or during ``build()``.
    """


class MalformedPattern(ConfigurationError):
    """A pattern string could not be split into a method and a path.

    Accepted forms are ``"METHOD /path"`` and ``"/path"``.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Malformed pattern {pattern!r}: {reason}")


class DuplicateRoute(ConfigurationError):
    """Two registrations landed in the same registry slot.

    ``key`` is the later registration, ``previous`` the one it would
    replace. They differ when only parameter names or surrounding slashes
    tell them apart. Only raised when ``BuilderConfig.duplicates`` is
    ``"error"``.
    """

    def __init__(self, key: Any, previous: Any = None) -> None:
        self.key = key
        self.previous = key if previous is None else previous
        if self.previous == key:
            msg = f"Route {key} is registered more than once"
        else:
            msg = f"Route {key} collides with {self.previous} registered earlier"
        super().__init__(msg)


@dataclass(frozen=True, slots=True)
class HTTPError(MuxtreeError):
    """An error that maps directly to an HTTP status code.

    Raised by the registry or handlers. The ASGI pipeline catches these
    and turns them into plain responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
