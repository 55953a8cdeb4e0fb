"""Pytest configuration and fixtures."""

import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

import pytest

from binbot.config import Config
from binbot.constants import SEED_CONTAINERS
from binbot.conversation import ConversationController
from binbot.intent import IntentInterpreter
from binbot.speech import SpeechOutput
from binbot.tools.store import ContainerStore
from binbot.vision import ImageInterpreter


def tool_response(name: str, arguments: Any) -> dict:
    """Build a completion dict carrying a single tool call."""
    return {
        "role": "assistant",
        "content": "",
        "tool_calls": [{"id": "toolu_test", "name": name, "arguments": arguments}],
    }


def text_response(text: str) -> dict:
    """Build a completion dict carrying only text."""
    return {"role": "assistant", "content": text}


class FakeLLM:
    """Scripted stand-in for binbot.llm.LLM."""

    def __init__(self, responses: Optional[list] = None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls: list[dict] = []

    def complete(self, messages, tools=None, tool_choice=None, temperature=None, max_tokens=None):
        self.calls.append({
            "messages": messages,
            "tools": tools,
            "tool_choice": tool_choice,
            "temperature": temperature,
        })
        if self.error:
            raise self.error
        return self.responses.pop(0)

    @property
    def system_prompt(self) -> str:
        """System prompt of the most recent call."""
        return next(m["content"] for m in self.calls[-1]["messages"] if m["role"] == "system")


class RecordingSpeech(SpeechOutput):
    """Speech output that remembers what it was asked to do."""

    supported = True

    def __init__(self):
        self.spoken: list[str] = []
        self.cancels = 0

    def speak(self, text: str) -> None:
        self.spoken.append(text)

    def cancel(self) -> None:
        self.cancels += 1


class FailingSpeech(SpeechOutput):
    """Speech output whose engine refuses to play."""

    supported = True

    def __init__(self):
        self.attempts = 0

    def speak(self, text: str) -> None:
        self.attempts += 1
        raise RuntimeError("run loop already started")

    def cancel(self) -> None:
        pass


class FailingSessionLogger:
    """Session logger whose disk is unavailable."""

    def __init__(self):
        self.attempts = 0

    def log_message(self, sender, text, message_id=None):
        self.attempts += 1
        raise OSError("No space left on device")

    def log_action(self, command, action, response):
        self.attempts += 1
        raise OSError("No space left on device")


class BlockingInterpreter:
    """Intent interpreter whose reply waits until released."""

    def __init__(self, action):
        self.action = action
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def interpret(self, command, containers, pending_scan=None):
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        return self.action


class BlockingImageInterpreter:
    """Image interpreter whose reply waits until released."""

    def __init__(self, items):
        self.items = items
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def analyze(self, image, media_type="image/jpeg"):
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        return self.items


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store():
    """Store seeded with the two demo containers."""
    return ContainerStore(SEED_CONTAINERS)


@pytest.fixture
def speech():
    return RecordingSpeech()


@pytest.fixture
def make_controller(store, speech):
    """Build a controller around scripted LLM replies."""

    def _make(responses=None, image_responses=None, error=None, image_error=None):
        intent_llm = FakeLLM(responses, error)
        image_llm = FakeLLM(image_responses, image_error)
        controller = ConversationController(
            IntentInterpreter(intent_llm),
            ImageInterpreter(image_llm),
            store=store,
            speech=speech,
        )
        return controller, intent_llm, image_llm

    return _make


@pytest.fixture
def mock_config(temp_dir):
    """Create a mock configuration."""
    return Config(
        anthropic_api_key="test_key",
        default_model="anthropic:claude-haiku-4-5",
        log_dir=temp_dir,
    )
