"""Tests for the LLM layer."""

from types import SimpleNamespace

import pytest

from binbot.errors import InterpretParseError
from binbot.llm import LLM, extract_tool_payload


class FakeMessages:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(content=self.content)


def make_llm(content):
    llm = LLM(LLM.parse_model_string("anthropic:claude-haiku-4-5"), "sk-test")
    llm.client = SimpleNamespace(messages=FakeMessages(content))
    return llm


def test_complete_forces_tool_and_splits_system():
    """Test request shape and tool call extraction."""
    llm = make_llm([
        SimpleNamespace(type="tool_use", id="toolu_1", name="record_action",
                        input={"action": "UNKNOWN"}),
    ])
    tools = [{"type": "function", "function": {"name": "record_action",
                                                "parameters": {"type": "object"}}}]

    result = llm.complete(
        [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}],
        tools=tools,
        tool_choice="record_action",
        temperature=0.2,
    )

    kwargs = llm.client.messages.kwargs
    assert kwargs["system"] == "be brief"
    assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
    assert kwargs["tool_choice"] == {"type": "tool", "name": "record_action"}
    assert kwargs["tools"][0]["input_schema"] == {"type": "object"}
    assert kwargs["temperature"] == 0.2
    assert kwargs["model"] == "claude-haiku-4-5-20251001"
    assert result["tool_calls"][0]["arguments"] == {"action": "UNKNOWN"}


def test_complete_collects_text():
    """Test text blocks are concatenated."""
    llm = make_llm([
        SimpleNamespace(type="text", text="Hello "),
        SimpleNamespace(type="text", text="there"),
    ])

    result = llm.complete([{"role": "user", "content": "hi"}])

    assert result == {"role": "assistant", "content": "Hello there"}
    assert "system" not in llm.client.messages.kwargs
    assert "tool_choice" not in llm.client.messages.kwargs


def test_missing_key_rejected():
    """Test the client refuses to start without a key."""
    with pytest.raises(ValueError):
        LLM(LLM.parse_model_string("anthropic:claude-haiku-4-5"), "")


def test_parse_model_string_rejects_unknown():
    """Test unsupported model strings."""
    with pytest.raises(ValueError):
        LLM.parse_model_string("openai:gpt-4o")
    assert "anthropic:claude-haiku-4-5" in LLM.list_models()


def test_extract_tool_payload_ignores_other_tools():
    """Test only the named tool's call is used."""
    response = {
        "content": '{"action": "UNKNOWN"}',
        "tool_calls": [{"id": "x", "name": "other", "arguments": {"a": 1}}],
    }

    assert extract_tool_payload(response, "record_action") == {"action": "UNKNOWN"}


def test_extract_tool_payload_without_payload():
    """Test an empty reply raises a parse error."""
    with pytest.raises(InterpretParseError):
        extract_tool_payload({"content": ""}, "record_action")
