"""Plume CLI — dev server and route listing.

Entry point registered as ``plume`` in ``pyproject.toml``::

    [project.scripts]
    plume = "plume.cli:main"
"""

import argparse
import logging
import sys


def configure_logging(level: str) -> None:
    """Configure root logging for CLI commands."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``plume`` command."""
    parser = argparse.ArgumentParser(
        prog="plume",
        description="Plume — a small Model-View-Controller web framework.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: the app's AppConfig.log_level)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- plume run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the development server")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. blog.app:create_app)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    # -- plume routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. blog.app:create_app)",
    )

    for sub in (run_parser, routes_parser):
        sub.add_argument(
            "--db",
            default=None,
            metavar="URL",
            help="Database URL handed to the app factory as db_url",
        )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from plume.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from plume.cli._routes import run_routes

        run_routes(args)
