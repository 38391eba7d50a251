# src/exec_assistant/nlp/json_extract.py

"""
Best-effort JSON object extraction from free-form model output.

Models wrap JSON in prose or ```json fences; the extractor finds the first balanced
{...} substring. Braces inside JSON string literals do not count towards nesting.
"""

from __future__ import annotations

from collections.abc import Callable

JsonExtractor = Callable[[str], "str | None"]


def extract_first_json_object(raw: str) -> str | None:
    """Return the first balanced {...} substring of `raw`, or None if there is none."""
    if not raw:
        return None

    start = raw.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(raw)):
            ch = raw[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return raw[start : i + 1]
        # Unbalanced from this brace; try the next opening brace.
        start = raw.find("{", start + 1)

    return None
