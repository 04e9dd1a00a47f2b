# src/zentask/cli/main.py

"""
CLI entrypoint.

Initializes logging, then runs one of:
- serve:   the task API (Flask) backed by the configured storage,
- console: the interactive client talking to a running server.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from .. import __version__
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from .bootstrap import create_client_store, create_server_app

logger = logging.getLogger(__name__)


def _build_parser(settings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="zentask", description="Single-user task list.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the task API server.")
    serve.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    serve.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")

    console = sub.add_parser("console", help="Run the interactive console client.")
    console.add_argument(
        "--api-url",
        default=settings.api_url,
        help=f"Task API base URL (default: {settings.api_url})",
    )
    return ap


def _serve(settings, host: str, port: int) -> None:
    app = create_server_app(settings=settings)
    logger.info("Serving task API on http://%s:%s (storage=%s)", host, port, settings.storage_backend)
    app.run(host=host, port=port, debug=False, use_reloader=False)


def _console(settings, api_url: str) -> None:
    with asyncio.Runner() as runner:
        api, store = create_client_store(settings=settings, api_url=api_url)
        try:
            run_console_loop(store, runner, app_name=settings.app_name)
        finally:
            runner.run(api.aclose())


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    args = _build_parser(settings).parse_args(argv)

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s %s (%s)...", settings.app_name, __version__, args.command)

    try:
        if args.command == "serve":
            _serve(settings, args.host, args.port)
        else:
            _console(settings, args.api_url)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
