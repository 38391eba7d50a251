# src/exec_assistant/nlp/assist.py

from __future__ import annotations

import logging

from ..core.ports import LLMClient
from ..errors import ProviderError
from .prompts import SUGGEST_RESPONSE_PROMPT_TEMPLATE, SUMMARY_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


class TextAssistant:
    """Free-text helpers on top of the LLM: summaries and reply suggestions."""

    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    async def summarize(self, text: str) -> str:
        """Concise summary of `text`; returns the input unchanged if the model is unavailable."""
        if not text or not text.strip():
            return ""
        try:
            summary = (await self._llm.generate(SUMMARY_PROMPT_TEMPLATE.format(text=text))).strip()
        except Exception:
            logger.exception("Error generating summary")
            return text
        return summary or text

    async def suggest_response(self, context: str) -> str:
        if not context or not context.strip():
            raise ValueError("context is required")
        try:
            reply = await self._llm.generate(SUGGEST_RESPONSE_PROMPT_TEMPLATE.format(context=context))
        except ProviderError:
            logger.warning("Error suggesting response (provider unavailable)")
            raise
        except Exception as e:
            logger.exception("Error suggesting response")
            raise ProviderError("llm", "Failed to generate response suggestion") from e
        return reply.strip()
