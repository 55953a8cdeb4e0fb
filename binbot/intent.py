"""Intent interpretation for natural language container commands."""

import logging
from datetime import datetime, timezone
from typing import Optional

import anthropic
from pydantic import ValidationError

from binbot.actions import ACTION_TOOL, Action, Unknown, decode_action
from binbot.constants import INTERPRET_TEMPERATURE
from binbot.errors import InterpretError, InterpretSchemaError, InterpretTransportError
from binbot.llm import LLM, extract_tool_payload
from binbot.models import Container, PendingScan

logger = logging.getLogger(__name__)


class IntentInterpreter:
    """Turns a user's command into a structured Action."""

    def __init__(self, llm: LLM):
        """Initialize intent interpreter.

        Args:
            llm: LLM instance to use for interpretation
        """
        self.llm = llm

    def interpret(
        self,
        command: str,
        containers: list[Container],
        pending_scan: Optional[PendingScan] = None,
    ) -> Action:
        """Interpret a command against the current containers.

        Any interpretation failure degrades to an UNKNOWN action.

        Args:
            command: User's natural language command
            containers: Snapshot of the current containers
            pending_scan: Items from a camera scan awaiting selection

        Returns:
            Decoded Action
        """
        try:
            return self.request_action(command, containers, pending_scan)
        except InterpretError as e:
            logger.warning("Error interpreting user command %r: %s", command, e)
            return Unknown()

    def request_action(
        self,
        command: str,
        containers: list[Container],
        pending_scan: Optional[PendingScan] = None,
    ) -> Action:
        """Ask the LLM for an action without the UNKNOWN fallback.

        Raises:
            InterpretTransportError: If the request fails
            InterpretParseError: If the reply carries no JSON payload
            InterpretSchemaError: If the payload is not a valid Action
        """
        messages = [
            {"role": "system", "content": self.build_system_prompt(containers, pending_scan)},
            {"role": "user", "content": f'User command: "{command}"'},
        ]

        tool_name = ACTION_TOOL["function"]["name"]
        try:
            response = self.llm.complete(
                messages,
                tools=[ACTION_TOOL],
                tool_choice=tool_name,
                temperature=INTERPRET_TEMPERATURE,
            )
        except anthropic.APIError as e:
            raise InterpretTransportError(str(e)) from e

        payload = extract_tool_payload(response, tool_name)
        if not isinstance(payload, dict):
            raise InterpretSchemaError(f"Expected a JSON object, got {type(payload).__name__}")
        try:
            return decode_action(payload)
        except ValidationError as e:
            raise InterpretSchemaError(str(e)) from e

    def build_system_prompt(
        self,
        containers: list[Container],
        pending_scan: Optional[PendingScan] = None,
    ) -> str:
        """Build the system prompt for intent interpretation.

        Returns:
            System prompt string
        """
        now = datetime.now(timezone.utc).isoformat()
        if containers:
            available = ", ".join(f"Container #{c.id}" for c in containers)
        else:
            available = "None"
        highest = max((c.id for c in containers), default=0)

        scan_context = ""
        if pending_scan:
            scan_id = pending_scan.container_id
            scan_context = f"""
IMPORTANT CONTEXT: The user is currently confirming items from a camera scan for container #{scan_id}. The list of scanned items is: [{", ".join(pending_scan.items)}].
The user's current command is their selection from this list. You must interpret their selection and generate an UPDATE_ITEMS action for container #{scan_id} with only the selected items in the 'itemsToAdd' field.
For example, if the user says "only the remote please", find the remote in the list and create the action for it.
If they say "add all of them", add all items in the context list. If they say 'none', 'cancel', or 'nevermind', return an UPDATE_ITEMS action with an empty 'itemsToAdd' array.
After this clarification, resume normal operation.
"""

        return f"""You are an AI assistant managing garage storage containers. Your task is to interpret user commands and translate them into a structured action using the record_action tool.
- Current time is {now}.
- Available containers are: {available}.
- The highest container ID currently is {highest}.
- Infer the user's intent and extract parameters. If an intent is unclear, use the UNKNOWN action.
- Be liberal in what you identify as an 'item'.
{scan_context}
Actions and their requirements:
- UPDATE_ITEMS: Adds and/or removes one or more items from a container. Requires 'containerNumber', and at least one of 'itemsToAdd' or 'itemsToRemove'.
- LIST_ITEMS: Lists items in a specific container. Requires 'containerNumber'.
- LIST_ALL_CONTAINERS: Lists all containers and their contents. Does not require any parameters.
- CLEAR_CONTAINER: Empties a container of all its items. Requires 'containerNumber'.
- CREATE_CONTAINER: Creates a new container. If items are mentioned, include them in the 'items' array. 'containerNumber' should not be set.
- DELETE_CONTAINER: Deletes or removes an entire container. Requires 'containerNumber'.
- UNKNOWN: Use for commands that cannot be understood or are too vague.

Example user commands:
- "delete the tent from container 2" -> {{"action": "UPDATE_ITEMS", "containerNumber": 2, "itemsToRemove": ["Tent"]}}
- "add skis to container 1" -> {{"action": "UPDATE_ITEMS", "containerNumber": 1, "itemsToAdd": ["skis"]}}
- "in container 2, add sleeping bags and remove the tent" -> {{"action": "UPDATE_ITEMS", "containerNumber": 2, "itemsToAdd": ["sleeping bags"], "itemsToRemove": ["tent"]}}
- "get rid of container 1" -> {{"action": "DELETE_CONTAINER", "containerNumber": 1}}
- "make a new container for sports stuff" -> {{"action": "CREATE_CONTAINER", "items": ["sports stuff"]}}"""
