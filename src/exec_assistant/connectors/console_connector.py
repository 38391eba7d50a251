# src/exec_assistant/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from ..cli.commands import format_task
from ..cli.commands import registry as command_registry
from ..core.assistant import CommandOutcome
from ..core.state import AppState
from ..dispatch.results import MeetingScheduled
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _describe_data(data: Any) -> list[str]:
    if data is None:
        return []
    if isinstance(data, Task):
        return [format_task(data)]
    if isinstance(data, MeetingScheduled):
        ev = data.event
        return [
            f"{ev.summary}: {ev.start.isoformat()} -> {ev.end.isoformat()} ({data.outcome.value})",
            *([f"link: {ev.html_link}"] if ev.html_link else []),
        ]
    if isinstance(data, list):
        out: list[str] = []
        for item in data:
            if isinstance(item, Task):
                out.append(format_task(item))
            elif hasattr(item, "summary") and hasattr(item, "start"):
                out.append(f"{item.start.isoformat()}  {item.summary}")
            else:
                out.append(str(item))
        return out
    message_id = getattr(data, "message_id", None)
    if message_id is not None:
        return [f"message id: {message_id}"]
    return [str(data)]


def render_outcome(outcome: CommandOutcome) -> str:
    action = outcome.intent.action.value if outcome.intent is not None else "unknown"
    if not outcome.success:
        lines = [f"[{action}] Failed: {outcome.error}"]
        if outcome.partial is not None:
            lines.append(f"  Note: event {getattr(outcome.partial, 'id', '?')} was created; check the calendar.")
        return "\n".join(lines)

    result = outcome.result
    if result is None:
        return f"[{action}] Done."
    lines = [f"[{action}] {result.message}"]
    lines.extend(f"  {line}" for line in _describe_data(result.data))
    return "\n".join(lines)


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    input() runs in a worker thread so the scheduler timers keep firing on the event loop.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a command in plain language. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> You: ")).strip()
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

        try:
            cmd_response = await command_registry.handle(state, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        try:
            outcome = await state.assistant.process_command(user_input, state.user_email)
        except Exception:
            logger.exception("Console command pipeline crashed.")
            _print_ts("Internal error while processing the command.")
            continue

        _print_ts(render_outcome(outcome))

    logger.info("Console connector finished.")
