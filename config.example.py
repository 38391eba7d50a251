# config.example.py

"""
Documentation-only module (safe to commit).

Settings come from environment variables, optionally loaded from a local .env file
(see src/exec_assistant/config.py). Keep API keys in .env, never in this file.
"""

ENV_VARS = {
    # App / logging
    "EXEC_APP_NAME": "App display name (default: exec-assistant).",
    "EXEC_LOG_LEVEL": "Console logging level (default: INFO).",
    "EXEC_DATA_DIR": "Local data directory for logs (default: .local/exec_assistant).",
    # Switches
    "EXEC_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    "EXEC_SCHEDULER_ENABLED": "Run reminder and digest timers (true/false, default: true).",
    # LLM / OpenRouter
    "EXEC_OPENROUTER_API_KEY": "OpenRouter API key; without it the offline client is used.",
    "EXEC_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "EXEC_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "EXEC_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "EXEC_APP_TITLE": "Optional OpenRouter metadata header title.",
    # Email / SendGrid
    "EXEC_SENDGRID_API_KEY": "SendGrid API key; without it emails go to the local outbox.",
    "EXEC_SENDGRID_BASE_URL": "SendGrid API base URL (default: https://api.sendgrid.com).",
    "EXEC_EMAIL_FROM": "Verified sender address used for every outgoing email.",
    # Calendar / availability
    "EXEC_GOOGLE_CLIENT_ID": "Google OAuth client id; with secret + refresh token enables Google Calendar.",
    "EXEC_GOOGLE_CLIENT_SECRET": "Google OAuth client secret.",
    "EXEC_GOOGLE_REFRESH_TOKEN": "Google OAuth refresh token (calendar scope); without it the in-memory calendar is used.",
    "EXEC_GOOGLE_CALENDAR_ID": "Calendar to use (default: primary).",
    "EXEC_TIMEZONE": "IANA zone for working hours and ambiguous dates (default: UTC).",
    "EXEC_WORKDAY_START_HOUR": "First working hour for slot search (default: 9).",
    "EXEC_WORKDAY_END_HOUR": "End of the working day for slot search (default: 17).",
    # Reminders
    "EXEC_REMINDER_INTERVAL_SECONDS": "Reminder tick period (default: 3600).",
    "EXEC_REMINDER_LOOKAHEAD_HOURS": "Remind about tasks due within this window (default: 24).",
    "EXEC_DIGEST_HOUR": "Local hour of the daily digest (default: 9).",
}
