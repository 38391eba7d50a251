# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from exec_assistant.logging_setup import ConsoleFilter, setup_logging


def record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    "name,level,shown",
    [
        ("exec_assistant.core.assistant", logging.INFO, True),
        ("exec_assistant.core.assistant", logging.DEBUG, True),
        ("exec_assistant.tasks.task_scheduler", logging.INFO, False),
        ("exec_assistant.tasks.task_scheduler", logging.WARNING, True),
        ("exec_assistant.email.senders", logging.INFO, False),
        ("httpx", logging.WARNING, False),
        ("httpx", logging.ERROR, True),
        ("py.warnings", logging.WARNING, False),
    ],
)
def test_console_filter_thresholds(name, level, shown):
    assert ConsoleFilter().filter(record(name, level)) is shown


def test_setup_logging_writes_everything_to_file(tmp_path):
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("exec_assistant.tasks.task_scheduler").debug("tick at %s", "09:00")
        for h in root.handlers:
            h.flush()
        assert log_file.parent == tmp_path / "logs"
        assert "tick at 09:00" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
