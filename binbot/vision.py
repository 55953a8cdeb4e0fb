"""Identifies items in a photo of a container's contents."""

import base64
import logging

import anthropic
from pydantic import BaseModel, ValidationError

from binbot.constants import INTERPRET_TEMPERATURE
from binbot.errors import InterpretError, InterpretSchemaError, InterpretTransportError
from binbot.llm import LLM, extract_tool_payload

logger = logging.getLogger(__name__)

SCAN_INSTRUCTION = (
    "Analyze this image of the inside of a storage container. "
    "Identify the main, distinct items you see. "
    "If the image is unclear or empty, return an empty array."
)

ITEMS_TOOL = {
    "type": "function",
    "function": {
        "name": "record_items",
        "description": "Record the distinct items identified in the image",
        "parameters": {
            "type": "object",
            "properties": {
                "items": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "A list of distinct items identified in the image.",
                },
            },
            "required": ["items"],
        },
    },
}


class ScanResult(BaseModel):
    """Items reported by the model."""

    items: list[str] = []


class ImageInterpreter:
    """Asks the LLM which items are visible in an image."""

    def __init__(self, llm: LLM):
        self.llm = llm

    def analyze(self, image: bytes, media_type: str = "image/jpeg") -> list[str]:
        """Identify the distinct items in an image.

        Returns an empty list when nothing is identified or the request fails.
        """
        if not image:
            return []
        try:
            items = self.request_items(image, media_type)
        except InterpretError as e:
            logger.warning("Error analyzing image: %s", e)
            return []
        return [item.strip() for item in items if item and item.strip()]

    def request_items(self, image: bytes, media_type: str = "image/jpeg") -> list[str]:
        """Ask the LLM for the item list without the empty-list fallback.

        Raises:
            InterpretError: If the request fails or the reply is off-schema
        """
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.b64encode(image).decode("ascii"),
                },
            },
            {"type": "text", "text": SCAN_INSTRUCTION},
        ]

        tool_name = ITEMS_TOOL["function"]["name"]
        try:
            response = self.llm.complete(
                [{"role": "user", "content": content}],
                tools=[ITEMS_TOOL],
                tool_choice=tool_name,
                temperature=INTERPRET_TEMPERATURE,
            )
        except anthropic.APIError as e:
            raise InterpretTransportError(str(e)) from e

        payload = extract_tool_payload(response, tool_name)
        try:
            return ScanResult.model_validate(payload).items
        except ValidationError as e:
            raise InterpretSchemaError(str(e)) from e
