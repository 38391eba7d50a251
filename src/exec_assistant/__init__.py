"""Natural-language executive assistant: commands -> calendar, email and task actions."""

__version__ = "0.1.0"
