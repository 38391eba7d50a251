# src/exec_assistant/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import cast

from ..calendar.availability import DEFAULT_DURATION_MINUTES, find_available_slots
from ..core.state import AppState
from ..errors import AssistantError
from ..llm.client import friendly_llm_error_message
from ..tasks.task_models import Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandReply = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandReply]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandReply]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command. Handlers may be sync or async.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            reply = cast(CommandHandler3, handler)(state, args, emit)
        else:
            reply = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(reply):
            reply = await reply
        return reply

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    who = f" -> {task.assigned_to}" if task.assigned_to else ""
    flag = " [reminded]" if task.reminder_sent else ""
    return (
        f"{task.id}  [{task.status.value}/{task.priority.value}] {task.title} "
        f"(due {task.due_date.strftime('%Y-%m-%d %H:%M %Z')}){who}{flag}"
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    models = ", ".join(list(getattr(s, "llm_models", []) or []))
    return (
        "Status:\n"
        f"  LLM: {type(state.llm).__name__} (models: {models})\n"
        f"  Email: {type(state.email_sender).__name__}\n"
        f"  Calendar: {type(state.calendar).__name__}\n"
        f"  Time zone: {getattr(s, 'timezone', 'UTC')} "
        f"(working hours {getattr(s, 'workday_start_hour', 9):02d}-{getattr(s, 'workday_end_hour', 17):02d})\n"
        f"  Tasks stored: {state.task_store.count_tasks()}"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks            -> all tasks (by due date)
    /tasks <status>   -> only tasks with that status
    """
    try:
        status = TaskStatus.parse(args[0]) if args else None
    except ValueError as e:
        return str(e)
    tasks = state.task_store.list_tasks(status=status)
    if not tasks:
        return "No tasks."
    return "\n".join(format_task(t) for t in tasks)


def cmd_task(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /task <id>"
    try:
        task = state.task_store.get_task(args[0])
    except AssistantError as e:
        return str(e)
    lines = [format_task(task)]
    if task.description:
        lines.append(f"  {task.description}")
    if task.tags:
        lines.append(f"  tags: {', '.join(task.tags)}")
    lines.append(f"  created {task.created_at.isoformat()} / updated {task.updated_at.isoformat()}")
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    try:
        task = state.task_store.update_task(args[0], status=TaskStatus.COMPLETED)
    except AssistantError as e:
        return str(e)
    return f"Completed: {format_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    try:
        state.task_store.delete_task(args[0])
    except AssistantError as e:
        return str(e)
    return f"Deleted task {args[0]}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    st = state.task_store.stats()
    prio = ", ".join(f"{k}={v}" for k, v in st.by_priority.items())
    return (
        f"Tasks: total={st.total} pending={st.pending} in-progress={st.in_progress} "
        f"completed={st.completed} cancelled={st.cancelled} overdue={st.overdue}\n"
        f"By priority: {prio}"
    )


async def cmd_slots(state: AppState, args: list[str]) -> str:
    """
    /slots                      -> today, 60 minutes
    /slots 2025-03-14           -> that day, 60 minutes
    /slots 2025-03-14 30        -> that day, 30 minutes
    """
    s = state.settings
    try:
        day = date.fromisoformat(args[0]) if args else datetime.now(state.dates.tz).date()
        minutes = int(args[1]) if len(args) > 1 else DEFAULT_DURATION_MINUTES
        slots = await find_available_slots(
            state.calendar,
            day,
            minutes,
            tz=state.dates.tz,
            start_hour=getattr(s, "workday_start_hour", 9),
            end_hour=getattr(s, "workday_end_hour", 17),
        )
    except (ValueError, AssistantError) as e:
        return f"Cannot compute slots: {e}"

    if not slots:
        return f"No free slots of {minutes} min on {day.isoformat()}."
    lines = [f"Free slots on {day.isoformat()} (>= {minutes} min):"]
    for slot in slots:
        minutes_free = int(slot.duration.total_seconds() // 60)
        lines.append(f"  {slot.start.strftime('%H:%M')} - {slot.end.strftime('%H:%M')} ({minutes_free} min)")
    return "\n".join(lines)


async def cmd_events(state: AppState, args: list[str]) -> str:
    try:
        events = await state.calendar.list_events(datetime.now(state.dates.tz), None)
    except Exception as e:
        logger.exception("Listing events failed.")
        return f"Cannot list events: {e}"
    if not events:
        return "No upcoming events."
    return "\n".join(
        f"{ev.start.strftime('%Y-%m-%d %H:%M')} - {ev.end.strftime('%H:%M')}  {ev.summary}  ({ev.id})" for ev in events
    )


async def cmd_remind(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("[REMINDERS] Running reminder pass...")
    sent = await state.scheduler.reminder_tick()
    if sent is None:
        return "Reminder pass skipped or failed (see log)."
    return f"Reminders sent: {sent}"


async def cmd_digest(state: AppState, args: list[str]) -> str:
    digest = await state.scheduler.digest_tick()
    if digest is None:
        return "Digest skipped or failed (see log)."
    lines = [f"Digest: {digest.summary_line()}"]
    lines.extend(f"  overdue: {format_task(t)}" for t in digest.overdue)
    lines.extend(f"  upcoming: {format_task(t)}" for t in digest.upcoming)
    return "\n".join(lines)


async def cmd_summarize(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /summarize <text>"
    return await state.text.summarize(" ".join(args))


async def cmd_suggest(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /suggest <context>"
    try:
        return await state.text.suggest_response(" ".join(args))
    except AssistantError as e:
        return friendly_llm_error_message(e)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current configuration.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [pending|in-progress|completed|cancelled].")
registry.register("task", cmd_task, help_text="Show one task: /task <id>.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("stats", cmd_stats, help_text="Task statistics.")
registry.register("slots", cmd_slots, help_text="Free slots: /slots [YYYY-MM-DD] [minutes].")
registry.register("events", cmd_events, help_text="Upcoming calendar events.")
registry.register("remind", cmd_remind, help_text="Run the reminder pass now.")
registry.register("digest", cmd_digest, help_text="Build the daily digest now.")
registry.register("summarize", cmd_summarize, help_text="Summarize text: /summarize <text>.")
registry.register("suggest", cmd_suggest, help_text="Suggest an email reply: /suggest <context>.")
