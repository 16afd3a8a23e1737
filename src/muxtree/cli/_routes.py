"""``muxtree routes`` — list the routes a router tree builds.

Prints METHOD, PATH and handler name for every live registry entry, in
registration order.
"""

import argparse
import sys

from muxtree.cli._resolve import resolve_mux
from muxtree.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """Resolve ``args.target``, build it, and print its routes."""
    try:
        mux = resolve_mux(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.log:
        mux.print_registered_patterns()
        return

    routes = mux.routes
    if not routes:
        print("No routes registered.")
        return

    rows = [(route.method, route.path, route.handler_name) for route in routes]

    width_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    width_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{width_method}}}  {{:<{width_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = width_method + width_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handler_name in rows:
        print(fmt.format(method, path, handler_name))
