"""Builder — router trees and the flattening pass that turns them into a Mux."""

from muxtree.builder.build import build_tree, iter_breadth_first
from muxtree.builder.node import RouterNode

__all__ = [
    "RouterNode",
    "build_tree",
    "iter_breadth_first",
]
