#!/usr/bin/env python
"""
Start the BeejSeBazaar advisory API with uvicorn.
"""

import argparse
import logging

import uvicorn

from beejsebazaar.infra.config import get_config
from beejsebazaar.observability.logging_utils import init_logging

logger = logging.getLogger(__name__)


def main():
    cfg = get_config()
    parser = argparse.ArgumentParser(
        description="Start the BeejSeBazaar advisory API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python run_web.py                  # default host/port
    python run_web.py --port 8080      # custom port
    python run_web.py --reload         # auto-reload for development
        """,
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Bind address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=cfg.fastapi_port,
        help=f"Port (default: {cfg.fastapi_port}, from FASTAPI_PORT)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (development)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker processes (default: 1)",
    )
    args = parser.parse_args()

    init_logging(log_path=cfg.log_path, level=cfg.log_level)
    missing = cfg.missing_credentials()
    if missing:
        logger.warning("Missing credentials, dependent pages will report errors: %s", ", ".join(missing))

    display_host = args.host if args.host != "0.0.0.0" else "localhost"
    logger.info("Starting API server: http://%s:%s", display_host, args.port)
    logger.info("API docs: http://%s:%s/docs", display_host, args.port)

    uvicorn.run(
        "beejsebazaar.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
