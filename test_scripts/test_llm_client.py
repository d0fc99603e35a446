# initiative_prioritizer/test_scripts/test_llm_client.py
# Tests for the completion client and JSON extraction from untrusted text
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from openai import OpenAIError

from prioritizer.config import settings
from prioritizer.llm.client import (
    LLMClient,
    LLMResponseError,
    LLMUnavailableError,
    get_completion_provider,
    parse_json_object,
)


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_parse_plain_object():
    assert parse_json_object('{"next_step": "continue"}') == {"next_step": "continue"}


def test_parse_fenced_object():
    text = '```json\n{"questions": [], "is_complete": false}\n```'
    assert parse_json_object(text) == {"questions": [], "is_complete": False}


def test_parse_object_surrounded_by_prose():
    text = 'Claro, aquí está: {"executive_summary": "OPORTUNIDAD"} Saludos.'
    assert parse_json_object(text) == {"executive_summary": "OPORTUNIDAD"}


@pytest.mark.parametrize("text", [None, "", "   ", "sin json", "{roto", "[1, 2]", '{"a": }'])
def test_parse_rejects_non_objects(text):
    with pytest.raises(LLMResponseError):
        parse_json_object(text)


def test_complete_returns_message_content():
    openai_client = MagicMock()
    openai_client.chat.completions.create.return_value = completion('{"ok": true}')

    text = LLMClient(client=openai_client).complete("system", "user")

    assert text == '{"ok": true}'
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user"},
    ]
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["model"] == settings.OPENAI_MODEL


def test_api_errors_become_unavailable():
    openai_client = MagicMock()
    openai_client.chat.completions.create.side_effect = OpenAIError("rate limited")

    with pytest.raises(LLMUnavailableError):
        LLMClient(client=openai_client).complete("system", "user")


def test_empty_content_is_a_response_error():
    openai_client = MagicMock()
    openai_client.chat.completions.create.return_value = completion("")

    with pytest.raises(LLMResponseError):
        LLMClient(client=openai_client).complete("system", "user")


def test_gateway_token_is_sent_as_header():
    with patch.object(settings, "OPENAI_API_KEY", "sk-test"), \
         patch.object(settings, "OPENAI_BASE_URL", "https://gateway.example/v1"), \
         patch.object(settings, "OPENAI_GATEWAY_TOKEN", "gw-token"), \
         patch("prioritizer.llm.client.OpenAI") as openai_cls:
        LLMClient()

    kwargs = openai_cls.call_args.kwargs
    assert kwargs["api_key"] == "sk-test"
    assert kwargs["base_url"] == "https://gateway.example/v1"
    assert kwargs["default_headers"] == {"cf-aig-authorization": "Bearer gw-token"}


def test_missing_key_is_unavailable():
    with patch.object(settings, "OPENAI_API_KEY", ""):
        with pytest.raises(LLMUnavailableError):
            LLMClient()


def test_provider_is_none_when_disabled():
    with patch.object(settings, "LLM_ENABLED", False), patch.object(settings, "OPENAI_API_KEY", "sk-test"):
        assert get_completion_provider() is None
    with patch.object(settings, "LLM_ENABLED", True), patch.object(settings, "OPENAI_API_KEY", ""):
        assert get_completion_provider() is None
