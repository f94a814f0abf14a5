"""
Command-line entry point.

Usage::

    python -m wagerbridge serve --port 8000
"""

import argparse
import logging

from wagerbridge.core.config import settings
from wagerbridge.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run(
        "wagerbridge.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="WagerBridge service CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    configure_logging(level=settings.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
