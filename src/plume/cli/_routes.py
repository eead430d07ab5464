"""``plume routes`` — list registered routes.

Loads the app, freezes it (which compiles the route table) and prints
every route with its method, path and action.
"""

import argparse
import sys

from plume.cli import configure_logging
from plume.cli._resolve import load_app
from plume.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / PATH / ACTION table for a plume app."""
    try:
        app = load_app(args.app, db_url=args.db)
        configure_logging(args.log_level or app.config.log_level)
        routes = app.routes
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not routes:
        print("No routes registered.")
        return

    rows = [(route.method, route.path, route.action.name) for route in routes]
    method_width = max(len("METHOD"), *(len(method) for method, _, _ in rows))
    path_width = max(len("PATH"), *(len(path) for _, path, _ in rows))

    def line(method: str, path: str, action: str) -> str:
        return f"{method:<{method_width}}  {path:<{path_width}}  {action}"

    header = line("METHOD", "PATH", "ACTION")
    print(header)
    print("-" * len(header))
    for row in rows:
        print(line(*row))
