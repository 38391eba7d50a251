# src/exec_assistant/llm/client.py

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..errors import LLMNotConfiguredError, ProviderError

logger = logging.getLogger(__name__)

_BAD_MODELS: dict[str, float] = {}  # model -> retry_at (monotonic)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip()
    if not s:
        return default
    try:
        return float(s)
    except ValueError:
        return default


def _timeout_from_env() -> httpx.Timeout:
    """
    Timeouts are configurable via env so a slow model cannot stall a command forever.

    Defaults:
    - connect timeout: 5s
    - read timeout: 30s
    """
    read_timeout = _env_float("EXEC_LLM_READ_TIMEOUT_SECONDS", 30.0)
    connect_timeout = _env_float("EXEC_LLM_CONNECT_TIMEOUT_SECONDS", 5.0)
    return httpx.Timeout(connect=connect_timeout, read=read_timeout, write=10.0, pool=connect_timeout)


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    return isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException))


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if isinstance(err, LLMNotConfiguredError):
        return "LLM is not configured. Set EXEC_OPENROUTER_API_KEY (and EXEC_LLM_MODELS) in .env."
    return msg


def _extract_text(completion: Any) -> str:
    try:
        content = completion.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return ""
    return content or ""


class OpenRouterLLMClient:
    """
    OpenAI-compatible completion client (OpenRouter by default).

    Behavior:
    - Tries models in the order from settings (EXEC_LLM_MODELS).
    - 404 (model not available) -> model is parked for an hour, try next.
    - Rate limit / network issues / empty output -> try next.
    - Auth issues -> fail fast (no fallback across models).
    - No automatic retries inside the SDK (max_retries=0).

    Every failure surfaces as ProviderError with the last underlying error chained.
    """

    def __init__(self, settings: Any, *, http_client: httpx.AsyncClient | None = None) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = str(getattr(settings, "openrouter_base_url", "") or "")
        models: List[str] = [m.strip() for m in (getattr(settings, "llm_models", None) or []) if m and m.strip()]

        if not api_key or not str(api_key).strip():
            raise LLMNotConfiguredError("LLM API key is not set. Set EXEC_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise LLMNotConfiguredError("LLM base URL is not set. Set EXEC_OPENROUTER_BASE_URL in your .env.")
        if not models:
            raise LLMNotConfiguredError("LLM model list is empty. Set EXEC_LLM_MODELS in your .env.")

        self._models = models
        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._client = AsyncOpenAI(
            base_url=base_url,
            api_key=str(api_key),
            timeout=_timeout_from_env(),
            max_retries=0,
            http_client=http_client,
        )

    @property
    def models(self) -> list[str]:
        return list(self._models)

    async def aclose(self) -> None:
        await self._client.close()

    async def generate(self, prompt: str) -> str:
        last_error: Optional[Exception] = None
        now = time.monotonic()

        for model in self._models:
            retry_at = _BAD_MODELS.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.debug("LLM: trying model=%s", model)
            t0 = time.monotonic()
            try:
                completion = await self._client.chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    extra_headers=self._headers or None,
                )
            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise ProviderError(
                        "llm", "LLM authentication failed. Check your API key (EXEC_OPENROUTER_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    _BAD_MODELS[model] = time.monotonic() + 3600.0
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            text = _extract_text(completion)
            if text.strip():
                logger.debug("LLM: completed with model=%s (%.2fs)", model, time.monotonic() - t0)
                return text

            last_error = RuntimeError(f"Model returned no content: {model}")
            logger.info("LLM: empty completion from model=%s, trying next", model)

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise ProviderError("llm", "LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise ProviderError("llm", "LLM network/timeout error. Try again later or change models.") from last_error
            raise ProviderError("llm", "All LLM models failed.") from last_error

        raise ProviderError("llm", "All LLM models failed.")
