"""Structured intents produced by the LLM."""

import json
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ActionType(str, Enum):
    """Names of the actions the assistant can perform."""

    UPDATE_ITEMS = "UPDATE_ITEMS"
    LIST_ITEMS = "LIST_ITEMS"
    LIST_ALL_CONTAINERS = "LIST_ALL_CONTAINERS"
    CLEAR_CONTAINER = "CLEAR_CONTAINER"
    CREATE_CONTAINER = "CREATE_CONTAINER"
    DELETE_CONTAINER = "DELETE_CONTAINER"
    UNKNOWN = "UNKNOWN"


class _ActionBase(BaseModel):
    # The LLM fills one flat schema, so fields of other variants are dropped.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UpdateItems(_ActionBase):
    """Add and/or remove items in an existing container."""

    action: Literal["UPDATE_ITEMS"] = "UPDATE_ITEMS"
    container_number: Optional[int] = Field(None, alias="containerNumber")
    items_to_add: Optional[list[str]] = Field(None, alias="itemsToAdd")
    items_to_remove: Optional[list[str]] = Field(None, alias="itemsToRemove")


class ListItems(_ActionBase):
    """List the items of one container."""

    action: Literal["LIST_ITEMS"] = "LIST_ITEMS"
    container_number: Optional[int] = Field(None, alias="containerNumber")


class ListAllContainers(_ActionBase):
    """List every container and its contents."""

    action: Literal["LIST_ALL_CONTAINERS"] = "LIST_ALL_CONTAINERS"


class ClearContainer(_ActionBase):
    """Empty a container."""

    action: Literal["CLEAR_CONTAINER"] = "CLEAR_CONTAINER"
    container_number: Optional[int] = Field(None, alias="containerNumber")


class CreateContainer(_ActionBase):
    """Create a new container, optionally with initial items."""

    action: Literal["CREATE_CONTAINER"] = "CREATE_CONTAINER"
    items: Optional[list[str]] = None


class DeleteContainer(_ActionBase):
    """Delete a container entirely."""

    action: Literal["DELETE_CONTAINER"] = "DELETE_CONTAINER"
    container_number: Optional[int] = Field(None, alias="containerNumber")


class Unknown(_ActionBase):
    """The command could not be understood."""

    action: Literal["UNKNOWN"] = "UNKNOWN"


AnyAction = Union[
    UpdateItems,
    ListItems,
    ListAllContainers,
    ClearContainer,
    CreateContainer,
    DeleteContainer,
    Unknown,
]

Action = Annotated[AnyAction, Field(discriminator="action")]

_ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)


def decode_action(payload: Union[str, dict[str, Any]]) -> Action:
    """Decode an Action from the LLM's JSON text or already-parsed dict.

    Raises:
        json.JSONDecodeError: If a string payload is not valid JSON
        pydantic.ValidationError: If the payload does not match any variant
    """
    if isinstance(payload, str):
        payload = json.loads(payload)
    return _ACTION_ADAPTER.validate_python(payload)


# Tool definition the intent interpreter forces the model to call.
ACTION_TOOL = {
    "type": "function",
    "function": {
        "name": "record_action",
        "description": "Record the storage-container action the user asked for",
        "parameters": {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": [a.value for a in ActionType],
                    "description": "The action the user wants to perform.",
                },
                "containerNumber": {
                    "type": "integer",
                    "description": (
                        "The number of the container to act upon. "
                        "Not required for LIST_ALL_CONTAINERS or CREATE_CONTAINER."
                    ),
                },
                "items": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "Items to put in a new container. Only used with CREATE_CONTAINER."
                    ),
                },
                "itemsToAdd": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "Items to add to an existing container. Used with UPDATE_ITEMS."
                    ),
                },
                "itemsToRemove": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "Items to remove from an existing container. Used with UPDATE_ITEMS."
                    ),
                },
            },
            "required": ["action"],
        },
    },
}
