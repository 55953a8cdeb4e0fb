"""Session data: containers, pending scans and transcript messages."""

import uuid
from dataclasses import dataclass, field
from typing import Literal

Sender = Literal["user", "ai", "system"]


@dataclass
class Container:
    """A storage bin and the labels of the items inside it."""

    id: int
    items: list[str] = field(default_factory=list)

    def copy(self) -> "Container":
        return Container(id=self.id, items=list(self.items))


@dataclass
class PendingScan:
    """Items identified by a camera scan, awaiting the user's selection."""

    container_id: int
    items: list[str]


@dataclass
class Message:
    """One entry in the chat transcript."""

    sender: Sender
    text: str
    is_loading: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
