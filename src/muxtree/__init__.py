"""muxtree — build one flat HTTP routing table from a tree of sub-routers.

Each sub-router contributes a path prefix and inherits the root's
middleware; ``build()`` walks the tree once and registers every pattern,
wrapped in its middleware, into a single registry.

Basic usage::

    from muxtree import RouterNode

    root = RouterNode()
    root.prefix("/a")
    root.register_patterns({
        "GET /test/{name}": lambda request: "hello " + request.path_params["name"],
    })

    mux = root.build()   # an ASGI app
"""

__version__ = "0.1.0"
__all__ = [
    "BuilderConfig",
    "ConfigurationError",
    "DuplicateRoute",
    "HTTPError",
    "Handler",
    "MalformedPattern",
    "MethodNotAllowed",
    "Middleware",
    "Mux",
    "MuxtreeError",
    "NotFound",
    "Request",
    "Response",
    "RouteKey",
    "RouterNode",
    "normalize_path",
    "parse_pattern",
]

# name -> defining module; resolved on first attribute access
_LAZY_IMPORTS: dict[str, str] = {
    "BuilderConfig": "muxtree.config",
    "ConfigurationError": "muxtree.errors",
    "DuplicateRoute": "muxtree.errors",
    "HTTPError": "muxtree.errors",
    "Handler": "muxtree.middleware.protocol",
    "MalformedPattern": "muxtree.errors",
    "MethodNotAllowed": "muxtree.errors",
    "Middleware": "muxtree.middleware.protocol",
    "Mux": "muxtree.mux",
    "MuxtreeError": "muxtree.errors",
    "NotFound": "muxtree.errors",
    "Request": "muxtree.http.request",
    "Response": "muxtree.http.response",
    "RouteKey": "muxtree.routing.pattern",
    "RouterNode": "muxtree.builder.node",
    "normalize_path": "muxtree.routing.normalize",
    "parse_pattern": "muxtree.routing.pattern",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import muxtree`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_path), name)
