"""Tests for image analysis."""

import base64

import anthropic
import httpx

from binbot.vision import ImageInterpreter

from conftest import FakeLLM, text_response, tool_response


def test_analyze_returns_items():
    """Test items are read from the forced tool call."""
    llm = FakeLLM([tool_response("record_items", {"items": ["Remote", "Box"]})])

    items = ImageInterpreter(llm).analyze(b"\xff\xd8jpeg")

    assert items == ["Remote", "Box"]
    call = llm.calls[0]
    assert call["tool_choice"] == "record_items"
    image_block, text_block = call["messages"][0]["content"]
    assert image_block["source"]["media_type"] == "image/jpeg"
    assert base64.b64decode(image_block["source"]["data"]) == b"\xff\xd8jpeg"
    assert "distinct items" in text_block["text"]


def test_analyze_passes_media_type():
    """Test non-JPEG images keep their type."""
    llm = FakeLLM([tool_response("record_items", {"items": []})])

    ImageInterpreter(llm).analyze(b"png", media_type="image/png")

    assert llm.calls[0]["messages"][0]["content"][0]["source"]["media_type"] == "image/png"


def test_analyze_drops_blank_items():
    """Test empty labels are discarded."""
    llm = FakeLLM([tool_response("record_items", {"items": ["Remote", " ", ""]})])

    assert ImageInterpreter(llm).analyze(b"img") == ["Remote"]


def test_analyze_nothing_found():
    """Test an empty or missing list yields no items."""
    llm = FakeLLM([tool_response("record_items", {})])

    assert ImageInterpreter(llm).analyze(b"img") == []


def test_analyze_empty_image_skips_llm():
    """Test empty bytes never reach the LLM."""
    llm = FakeLLM()

    assert ImageInterpreter(llm).analyze(b"") == []
    assert llm.calls == []


def test_analyze_failures_return_empty_list():
    """Test malformed replies and API errors yield no items."""
    error = anthropic.APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )

    assert ImageInterpreter(FakeLLM([text_response("a remote")])).analyze(b"img") == []
    assert ImageInterpreter(FakeLLM([tool_response("record_items", {"items": "remote"})])).analyze(b"img") == []
    assert ImageInterpreter(FakeLLM(error=error)).analyze(b"img") == []
