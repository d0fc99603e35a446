# initiative_prioritizer/test_scripts/fakes.py
"""Test doubles shared by the intake tests."""
from __future__ import annotations

import json
from typing import Any, List, Tuple

from prioritizer.llm.client import LLMUnavailableError


class ScriptedProvider:
    """TextCompletionProvider that replays canned completions in order.

    Items may be dicts (sent as JSON), raw strings, or exceptions to raise.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if not self.responses:
            raise LLMUnavailableError("scripted provider exhausted")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, dict):
            return json.dumps(item, ensure_ascii=False)
        return item


def questions(*texts: str) -> List[dict]:
    return [{"id": f"q{i}", "text": t, "type": "text"} for i, t in enumerate(texts, start=1)]
