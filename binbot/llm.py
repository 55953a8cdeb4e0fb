"""LLM abstraction layer for Anthropic Claude models."""

import copy
import json
from dataclasses import dataclass
from typing import Any, Literal, Optional

from anthropic import Anthropic

from binbot.constants import SUPPORTED_MODELS
from binbot.errors import InterpretParseError


@dataclass
class ModelDescriptor:
    """Descriptor for an LLM model."""

    provider: Literal["anthropic"]
    name: str
    max_output_tokens: int
    temperature: float = 0.7


class LLM:
    """Anthropic Claude LLM interface."""

    def __init__(self, descriptor: ModelDescriptor, api_key: str):
        """Initialize LLM client.

        Args:
            descriptor: Model descriptor
            api_key: Anthropic API key

        Raises:
            ValueError: If the provider is unsupported or the key is missing
        """
        self.descriptor = descriptor
        self.api_key = api_key

        if descriptor.provider != "anthropic":
            raise ValueError(f"Only Anthropic models are supported. Got: {descriptor.provider}")
        if not api_key:
            raise ValueError("No Anthropic API key found. Set ANTHROPIC_API_KEY in .env")

        self.client = Anthropic(api_key=api_key)

    def complete(
        self,
        messages: list[dict[str, Any]],
        tools: Optional[list[dict]] = None,
        tool_choice: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """Generate a completion.

        Args:
            messages: List of message dicts with 'role' and 'content'. User
                content may be a list of Anthropic content blocks (e.g. images).
            tools: Optional list of tool definitions (OpenAI function format)
            tool_choice: Optional name of a tool the model must call
            temperature: Optional temperature override
            max_tokens: Optional max tokens override

        Returns:
            Response dict with 'content', optional 'tool_calls'
        """
        temp = temperature if temperature is not None else self.descriptor.temperature
        max_tok = max_tokens if max_tokens is not None else self.descriptor.max_output_tokens

        # Anthropic takes the system prompt separately
        system_messages = [m["content"] for m in messages if m["role"] == "system"]
        chat_messages = [copy.deepcopy(m) for m in messages if m["role"] != "system"]

        kwargs: dict[str, Any] = {
            "model": self.descriptor.name,
            "messages": chat_messages,
            "temperature": temp,
            "max_tokens": max_tok,
        }

        if system_messages:
            kwargs["system"] = "\n\n".join(system_messages)

        if tools:
            kwargs["tools"] = self._convert_tools_to_anthropic(tools)
            if tool_choice:
                kwargs["tool_choice"] = {"type": "tool", "name": tool_choice}

        response = self.client.messages.create(**kwargs)

        result: dict[str, Any] = {
            "role": "assistant",
            "content": "",
        }

        # Extract content and tool calls
        tool_calls = []
        for block in response.content:
            if block.type == "text":
                result["content"] += block.text
            elif block.type == "tool_use":
                tool_calls.append({
                    "id": block.id,
                    "name": block.name,
                    "arguments": block.input,
                })

        if tool_calls:
            result["tool_calls"] = tool_calls

        return result

    def _convert_tools_to_anthropic(self, openai_tools: list[dict]) -> list[dict]:
        """Convert OpenAI tool format to Anthropic format.

        Args:
            openai_tools: List of OpenAI tool definitions

        Returns:
            List of Anthropic tool definitions
        """
        anthropic_tools = []
        for tool in openai_tools:
            if tool["type"] == "function":
                func = tool["function"]
                anthropic_tools.append({
                    "name": func["name"],
                    "description": func.get("description", ""),
                    "input_schema": func.get("parameters", {}),
                })
        return anthropic_tools

    @classmethod
    def parse_model_string(cls, model_str: str) -> ModelDescriptor:
        """Parse model string into ModelDescriptor.

        Args:
            model_str: Model string (e.g., "anthropic:claude-haiku-4-5")

        Returns:
            ModelDescriptor

        Raises:
            ValueError: If model string is invalid
        """
        if model_str not in SUPPORTED_MODELS:
            raise ValueError(
                f"Unsupported model: {model_str}. "
                f"Supported: {', '.join(SUPPORTED_MODELS.keys())}"
            )

        model_config = SUPPORTED_MODELS[model_str]
        return ModelDescriptor(
            provider=model_config["provider"],
            name=model_config["name"],
            max_output_tokens=model_config["max_output_tokens"],
        )

    @classmethod
    def list_models(cls) -> list[str]:
        """List all supported model strings.

        Returns:
            List of model strings
        """
        return list(SUPPORTED_MODELS.keys())


def extract_tool_payload(response: dict[str, Any], tool_name: str) -> Any:
    """Pull the JSON payload out of a completion.

    Prefers the arguments of a call to ``tool_name``; falls back to parsing
    the text content as JSON.

    Raises:
        InterpretParseError: If no payload can be recovered
    """
    for tool_call in response.get("tool_calls") or []:
        if tool_call.get("name") != tool_name:
            continue
        arguments = tool_call.get("arguments")
        if isinstance(arguments, str):
            try:
                return json.loads(arguments)
            except json.JSONDecodeError as e:
                raise InterpretParseError(f"Tool arguments are not JSON: {e}") from e
        return arguments

    text = (response.get("content") or "").strip()
    if not text:
        raise InterpretParseError(f"No {tool_name} call and no text in response")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InterpretParseError(f"Response text is not JSON: {e}") from e
