# src/zentask/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_tasks
from ..client.store import TaskClientStore

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(
    store: TaskClientStore,
    runner: asyncio.Runner,
    *,
    app_name: str = "zentask",
    input_func: Callable[[str], str] = input,
) -> None:
    """
    Interactive console front-end.

    Input is read synchronously; each command runs to completion on `runner`,
    which keeps one event loop (and one HTTP connection pool) for the session.
    A line without a leading slash is added as a new task.
    """
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    if runner.run(store.fetch_tasks()):
        _print_ts(render_tasks(store.state))
    else:
        _print_ts(f"[error] {store.state.error}")

    while True:
        try:
            user_input = input_func(">>> ").strip()
            if input_func is input:
                _rewrite_prev_line(f"[{_ts_local()}] >>> {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            reply = runner.run(command_registry.handle(store, line, emit=emit))
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
