"""muxtree CLI — inspect the routing table a router tree builds.

Entry point registered as ``muxtree`` in ``pyproject.toml``::

    [project.scripts]
    muxtree = "muxtree.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``muxtree`` command."""
    parser = argparse.ArgumentParser(
        prog="muxtree",
        description="muxtree — build flat HTTP routing tables from router trees.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- muxtree routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the routes a tree builds")
    routes_parser.add_argument(
        "target",
        help="Import string of a RouterNode or Mux (e.g. myapp:root)",
    )
    routes_parser.add_argument(
        "--log",
        action="store_true",
        help="Print the raw registration log (duplicates included) instead of a table",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from muxtree.cli._routes import run_routes

        run_routes(args)
