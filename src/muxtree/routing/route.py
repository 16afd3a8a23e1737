"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``        (is_param=False)
    Param:   ``/{id}``         (is_param=True, param_name="id")
    Typed:   ``/{id:int}``     (is_param=True, param_name="id", param_type="int")
    Rest:    ``/{rest...}``    (is_param=True, param_name="rest", param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """One registry entry: a method and path bound to a wrapped handler.

    ``source`` is the unwrapped handler as it was registered on the router
    node, kept for introspection (the CLI prints its name).
    """

    method: str
    path: str
    handler: Callable[..., Awaitable[Any]]
    source: Callable[..., Any] | None = None

    @property
    def handler_name(self) -> str:
        target = self.source if self.source is not None else self.handler
        return getattr(target, "__qualname__", None) or repr(target)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
