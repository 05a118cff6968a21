#!/usr/bin/env python
"""
Start the SprintDesk API under uvicorn.

Command-line flags override the ``SPRINTDESK_*`` server settings:

    python run_api.py --reload
    python run_api.py --port 9000 --log-level debug
"""

import argparse
import logging

import uvicorn

from api.config import APISettings, get_settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start the SprintDesk API")
    parser.add_argument("--host", help="Interface to bind (default from SPRINTDESK_HOST)")
    parser.add_argument("--port", type=int, help="Port to bind (default from SPRINTDESK_PORT)")
    parser.add_argument("--reload", action="store_true", help="Restart on source changes")
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Root log level (default from SPRINTDESK_LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def configure_logging(settings: APISettings, level: str) -> None:
    logging.basicConfig(level=level.upper(), format=settings.log_format)


def main(argv=None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    level = args.log_level or settings.log_level

    configure_logging(settings, level)

    # The import string lets --reload re-import the app in the child process
    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=level,
    )


if __name__ == "__main__":
    main()
