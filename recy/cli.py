"""
CLI entry point for the audit service.

Usage:
    # Serve the API
    python -m recy.cli serve --port 8000

    # Create missing tables in the configured record store
    python -m recy.cli init-db

    # Same, against an explicit database
    python -m recy.cli init-db --database-url sqlite:///recy.db
"""

import argparse
import logging
from typing import Optional, Sequence

from recy.core.config import settings
from recy.infrastructure.database import build_engine, create_schema
from recy.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run("recy.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create the record store tables."""
    engine = build_engine(args.database_url or settings.get_database_dsn())
    try:
        create_schema(engine)
    finally:
        engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recy Network audit service CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(func=cmd_serve)

    init_parser = subparsers.add_parser("init-db", help="Create missing tables")
    init_parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (defaults to DATABASE_URL / POSTGRES_* settings)",
    )
    init_parser.set_defaults(func=cmd_init_db)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    configure_logging(level=settings.log_level, fmt=settings.log_format)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
