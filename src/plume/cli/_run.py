"""``plume run`` — development server command."""

import argparse
import sys

from plume.cli import configure_logging
from plume.cli._resolve import load_app
from plume.errors import ConfigurationError


def run_server(args: argparse.Namespace) -> None:
    """Load ``args.app`` and serve it with the pounce dev server."""
    try:
        app = load_app(args.app, db_url=args.db)
        configure_logging(args.log_level or app.config.log_level)

        from plume.server.dev import run_dev_server

        run_dev_server(
            app,
            args.host or app.config.host,
            args.port or app.config.port,
            reload=app.config.debug,
            app_path=args.app,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
