# src/exec_assistant/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (LLM / email fall back to offline implementations).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "EXEC"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load a local .env (if present); real environment variables win."""
    load_dotenv(override=False)


_load_dotenv()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Front-end / background switches ----
    console_enabled: bool
    scheduler_enabled: bool

    # ---- LLM / OpenRouter ----
    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    llm_models: List[str]
    extra_headers: Dict[str, str]

    # ---- Email / SendGrid ----
    sendgrid_api_key: Optional[str]
    sendgrid_base_url: str
    email_from: str

    # ---- Calendar / availability ----
    google_client_id: Optional[str]
    google_client_secret: Optional[str]
    google_refresh_token: Optional[str]
    google_calendar_id: str
    timezone: str
    workday_start_hour: int
    workday_end_hour: int

    # ---- Reminder scheduler ----
    reminder_interval_seconds: int
    reminder_lookahead_hours: int
    digest_hour: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="exec-assistant") or "exec-assistant"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/exec_assistant"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        scheduler_enabled = _env_bool(_k("SCHEDULER_ENABLED"), True)

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        http_referer = _env(_k("HTTP_REFERER"), "https://example.com")
        extra_headers = {
            "HTTP-Referer": http_referer,
            "X-Title": _env(_k("APP_TITLE"), app_name),
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-2.0-flash-exp:free",
                "qwen/qwen-2.5-72b-instruct:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ],
        )

        sendgrid_api_key = _first_env(_k("SENDGRID_API_KEY"), "SENDGRID_API_KEY", default=None)
        sendgrid_base_url = _env(_k("SENDGRID_BASE_URL"), "https://api.sendgrid.com")
        email_from = (_first_env(_k("EMAIL_FROM"), "SENDGRID_FROM_EMAIL", default="") or "").strip()

        google_client_id = _first_env(_k("GOOGLE_CLIENT_ID"), "GOOGLE_CLIENT_ID", default=None)
        google_client_secret = _first_env(_k("GOOGLE_CLIENT_SECRET"), "GOOGLE_CLIENT_SECRET", default=None)
        google_refresh_token = _first_env(_k("GOOGLE_REFRESH_TOKEN"), "GOOGLE_REFRESH_TOKEN", default=None)
        google_calendar_id = _env(_k("GOOGLE_CALENDAR_ID"), "primary").strip() or "primary"

        timezone = _env(_k("TIMEZONE"), "UTC").strip() or "UTC"
        workday_start_hour = _env_int(_k("WORKDAY_START_HOUR"), 9)
        workday_end_hour = _env_int(_k("WORKDAY_END_HOUR"), 17)

        reminder_interval_seconds = _env_int(_k("REMINDER_INTERVAL_SECONDS"), 3600)
        reminder_lookahead_hours = _env_int(_k("REMINDER_LOOKAHEAD_HOURS"), 24)
        digest_hour = _env_int(_k("DIGEST_HOUR"), 9)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            scheduler_enabled=scheduler_enabled,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            sendgrid_api_key=sendgrid_api_key,
            sendgrid_base_url=sendgrid_base_url,
            email_from=email_from,
            google_client_id=google_client_id,
            google_client_secret=google_client_secret,
            google_refresh_token=google_refresh_token,
            google_calendar_id=google_calendar_id,
            timezone=timezone,
            workday_start_hour=workday_start_hour,
            workday_end_hour=workday_end_hour,
            reminder_interval_seconds=reminder_interval_seconds,
            reminder_lookahead_hours=reminder_lookahead_hours,
            digest_hour=digest_hour,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
