"""Target resolution — turns ``"module:attribute"`` into a built Mux."""

import importlib

from muxtree.builder.node import RouterNode
from muxtree.mux import Mux


def resolve_mux(import_string: str) -> Mux:
    """Resolve an import string to a ``Mux``, building a tree if needed.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"mux"`` (``"myapp"`` resolves to ``myapp.mux``).

    The attribute may be a ``Mux``, a ``RouterNode`` (any node of the tree;
    it is built from the root), or a zero-argument factory returning
    either.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is neither a Mux nor a RouterNode.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "mux"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, (Mux, RouterNode)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, RouterNode):
        return obj.build()
    if isinstance(obj, Mux):
        return obj

    msg = f"{import_string!r} resolved to {type(obj).__name__}, not a RouterNode or Mux"
    raise TypeError(msg)
