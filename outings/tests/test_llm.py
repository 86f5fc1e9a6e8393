import json
from unittest.mock import MagicMock, patch

import pytest
from pydantic import BaseModel

from outings.errors import UpstreamUnavailable
from outings.llm.config import LLMConfig
from outings.llm.groq_client import GroqAnalyzer
from outings.llm.parsing import parse_json, request_json

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)


class Item(BaseModel):
    name: str
    score: float = 0.0


class StaticAnalyzer:
    def __init__(self, text: str):
        self.text = text

    def generate(self, prompt: str) -> str:
        return self.text


class FailingAnalyzer:
    def generate(self, prompt: str) -> str:
        raise RuntimeError("connection reset")


def _mock_groq_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


# ── GroqAnalyzer ─────────────────────────────────────────────────────────


@patch("outings.llm.groq_client.Groq")
def test_generate_returns_message_content(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response('{"ok": true}')

    analyzer = GroqAnalyzer(ENABLED_CONFIG)

    assert analyzer.generate("hello") == '{"ok": true}'
    kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][-1] == {"role": "user", "content": "hello"}


@patch("outings.llm.groq_client.Groq")
def test_generate_wraps_api_errors(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    with pytest.raises(UpstreamUnavailable):
        GroqAnalyzer(ENABLED_CONFIG).generate("hello")


@patch("outings.llm.groq_client.Groq")
def test_generate_disabled_makes_no_call(mock_groq_cls):
    with pytest.raises(UpstreamUnavailable):
        GroqAnalyzer(DISABLED_CONFIG).generate("hello")

    mock_groq_cls.assert_not_called()


def test_generate_without_key_is_unavailable():
    with pytest.raises(UpstreamUnavailable):
        GroqAnalyzer(LLMConfig(api_key="")).generate("hello")


# ── Parsing ──────────────────────────────────────────────────────────────


def test_parse_json_strips_markdown_fence():
    assert parse_json('```json\n{"a": 1}\n```') == {"a": 1}


def test_parse_json_rejects_garbage():
    with pytest.raises(UpstreamUnavailable):
        parse_json("not valid json{{{")


def test_request_json_validates_model():
    result = request_json(StaticAnalyzer(json.dumps({"name": "Cafe", "score": 0.7})), "p", Item)

    assert result == Item(name="Cafe", score=0.7)


def test_request_json_unwraps_list_key():
    payload = json.dumps({"items": [{"name": "A"}, {"name": "B"}]})

    result = request_json(StaticAnalyzer(payload), "p", list[Item], list_key="items")

    assert [i.name for i in result] == ["A", "B"]


def test_request_json_accepts_bare_list():
    result = request_json(StaticAnalyzer('[{"name": "A"}]'), "p", list[Item], list_key="items")

    assert result[0].name == "A"


def test_request_json_wrong_shape_is_unavailable():
    with pytest.raises(UpstreamUnavailable):
        request_json(StaticAnalyzer('{"score": "high"}'), "p", Item)


def test_request_json_analyzer_error_is_unavailable():
    with pytest.raises(UpstreamUnavailable):
        request_json(FailingAnalyzer(), "p", Item)
