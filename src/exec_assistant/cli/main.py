# src/exec_assistant/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs on one event loop:
- the reminder scheduler loops (optional),
- the console REPL (optional; otherwise waits until interrupted).
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging

from ..cli.bootstrap import close_state, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state, *, console: bool, scheduler: bool) -> None:
    if scheduler:
        state.scheduler.start()
    try:
        if console:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Running the scheduler only. Press Ctrl+C to stop.")
            await asyncio.Event().wait()
    finally:
        if scheduler:
            await state.scheduler.stop()
        await close_state(state)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    ap = argparse.ArgumentParser(prog="exec-assistant", description="Natural-language executive assistant.")
    ap.add_argument("--user-email", default=None, help="Default assignee/sender for created tasks.")
    ap.add_argument("--no-scheduler", action="store_true", help="Do not start the reminder scheduler.")
    ap.add_argument("--no-console", action="store_true", help="Run background scheduler only.")
    args = ap.parse_args(argv)

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    state.user_email = args.user_email

    console = settings.console_enabled and not args.no_console
    scheduler = settings.scheduler_enabled and not args.no_scheduler

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(state, console=console, scheduler=scheduler))

    logger.info("Bye.")


if __name__ == "__main__":
    main()
