# initiative_prioritizer/prioritizer/llm/client.py

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Protocol

from openai import OpenAI, OpenAIError

from prioritizer.config import settings

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class LLMError(RuntimeError):
    """Base class for text-completion failures."""


class LLMUnavailableError(LLMError):
    """Provider unreachable, misconfigured or answering with an API error."""


class LLMResponseError(LLMError):
    """Provider answered but the text is not the expected JSON object."""


class TextCompletionProvider(Protocol):
    def complete(self, system_prompt: str, user_prompt: str) -> str:
        ...


class LLMClient:
    """Thin wrapper around the OpenAI client for intake prompts.

    Works against api.openai.com or any OpenAI-compatible gateway
    (OPENAI_BASE_URL). When OPENAI_GATEWAY_TOKEN is set it is sent as the
    gateway's own authorization header next to the provider key.
    """

    def __init__(self, client: Optional[OpenAI] = None) -> None:
        if client is not None:
            self._client = client
            return

        api_key = settings.OPENAI_API_KEY
        if not api_key:
            raise LLMUnavailableError("OPENAI_API_KEY is not configured")

        headers: Dict[str, str] = {}
        if settings.OPENAI_GATEWAY_TOKEN:
            headers["cf-aig-authorization"] = f"Bearer {settings.OPENAI_GATEWAY_TOKEN}"

        self._client = OpenAI(
            api_key=api_key,
            base_url=settings.OPENAI_BASE_URL or None,
            default_headers=headers or None,
            timeout=settings.OPENAI_REQUEST_TIMEOUT,
            max_retries=settings.OPENAI_MAX_RETRIES,
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one system+user exchange and return the raw completion text."""
        try:
            resp = self._client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=settings.OPENAI_MAX_TOKENS,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                timeout=settings.OPENAI_REQUEST_TIMEOUT,
            )
        except OpenAIError as exc:
            logger.warning("llm.complete_error", extra={"reason": str(exc)})
            raise LLMUnavailableError(f"Text completion failed: {exc}") from exc

        if not resp.choices:
            raise LLMResponseError("Text completion returned no choices")
        content = resp.choices[0].message.content
        if not content:
            raise LLMResponseError("Text completion returned empty content")
        return content


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Parse untrusted completion text into a JSON object.

    Tolerates markdown code fences and prose around the object; anything
    else raises LLMResponseError.
    """
    if not text or not text.strip():
        raise LLMResponseError("Empty completion text")

    cleaned = _FENCE_RE.sub("", text.strip())
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise LLMResponseError("No JSON object found in completion text")

    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"Invalid JSON in completion text: {exc}") from exc

    if not isinstance(data, dict):
        raise LLMResponseError("Completion JSON is not an object")
    return data


def get_completion_provider() -> Optional[TextCompletionProvider]:
    """Configured provider, or None when disabled/unconfigured (deterministic mode)."""
    if not settings.LLM_ENABLED or not settings.OPENAI_API_KEY:
        return None
    return LLMClient()


__all__ = [
    "LLMError",
    "LLMUnavailableError",
    "LLMResponseError",
    "TextCompletionProvider",
    "LLMClient",
    "parse_json_object",
    "get_completion_provider",
]
