# src/exec_assistant/llm/offline.py

from __future__ import annotations

import json

from ..nlp.prompts import DATE_PROMPT_MARKER, INTENT_PROMPT_MARKER


class OfflineLLMClient:
    """
    Offline deterministic LLM client used when no external API is configured.

    Behavior:
    - Intent prompts -> an "unknown" intent with confidence 0
    - Date prompts -> empty reply, so the date resolver uses its fallback parser
    - Anything else -> an explanatory message
    """

    async def generate(self, prompt: str) -> str:
        p = prompt or ""

        if INTENT_PROMPT_MARKER in p:
            return json.dumps({"action": "unknown", "parameters": {}, "confidence": 0.0})

        if DATE_PROMPT_MARKER in p:
            return ""

        return (
            "Offline mode: no external LLM is configured.\n"
            "Set EXEC_OPENROUTER_API_KEY (and EXEC_LLM_MODELS) to enable real responses."
        )
