"""State models for LangGraph."""

from typing import Optional, TypedDict

from binbot.actions import AnyAction
from binbot.models import Container, PendingScan


class TurnState(TypedDict):
    """The state object passed through the turn workflow.

    Attributes:
        command: The user's command text
        containers: Snapshot of the containers when the turn started
        pending_scan: Scan awaiting selection, already taken off the session
        action: Action decoded by the interpret node
        response: Reply produced by the execute node
    """

    command: str
    containers: list[Container]
    pending_scan: Optional[PendingScan]
    action: Optional[AnyAction]
    response: str
