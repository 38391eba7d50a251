# src/exec_assistant/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "assistant.log"

# Console thresholds by logger prefix; the first match wins.
# Background loops (reminders, digests) and email delivery stay quiet on the console;
# the log file still gets everything.
CONSOLE_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("exec_assistant.tasks.task_scheduler", logging.WARNING),
    ("exec_assistant.email", logging.WARNING),
    ("exec_assistant.", logging.NOTSET),
)

# Client libraries that log every request at INFO/DEBUG.
CHATTY_LIBRARIES = ("httpx", "httpcore", "openai", "googleapiclient.discovery", "google.auth")


class ConsoleFilter(logging.Filter):
    """Per-prefix minimum level for the console; anything unlisted needs ERROR."""

    def __init__(
        self,
        thresholds: tuple[tuple[str, int], ...] = CONSOLE_THRESHOLDS,
        default: int = logging.ERROR,
    ) -> None:
        super().__init__()
        self._thresholds = thresholds
        self._default = default

    def min_level(self, name: str) -> int:
        for prefix, level in self._thresholds:
            if name.startswith(prefix):
                return level
        return self._default

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.min_level(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/exec_assistant",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler (filtered by ConsoleFilter) + file handler with full logs.
    Replaces any handlers already on the root logger. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(ConsoleFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    for name in CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
