"""Applies structured actions to the container store."""

from binbot.actions import (
    Action,
    ClearContainer,
    CreateContainer,
    DeleteContainer,
    ListAllContainers,
    ListItems,
    UpdateItems,
)
from binbot.constants import UNKNOWN_RESPONSE
from binbot.tools.store import ContainerStore

FALLBACK_RESPONSE = "Sorry, I couldn't perform that action."


def _quoted(items: list[str]) -> str:
    return f'"{", ".join(items)}"'


class ActionExecutor:
    """Maps an Action onto store mutations and a reply for the user.

    Never raises: missing containers and missing parameters are reported
    in the reply text.
    """

    def __init__(self, store: ContainerStore):
        """Initialize executor.

        Args:
            store: Container store to mutate
        """
        self.store = store

    def execute(self, action: Action) -> str:
        """Execute an action.

        Args:
            action: Decoded action

        Returns:
            Human-readable response
        """
        if isinstance(action, UpdateItems):
            return self._update_items(action)
        if isinstance(action, ListItems):
            return self._list_items(action)
        if isinstance(action, ListAllContainers):
            return self._list_all()
        if isinstance(action, ClearContainer):
            return self._clear(action)
        if isinstance(action, CreateContainer):
            return self._create(action)
        if isinstance(action, DeleteContainer):
            return self._delete(action)
        return UNKNOWN_RESPONSE

    def _update_items(self, action: UpdateItems) -> str:
        number = action.container_number
        if not number:
            return "Please specify which container to update."

        to_add = action.items_to_add or []
        to_remove = action.items_to_remove or []
        if self.store.update(number, to_add, to_remove) is None:
            return f"Sorry, I couldn't find container {number}."

        added = f"added {_quoted(to_add)}" if to_add else ""
        removed = f"removed {_quoted(to_remove)}" if to_remove else ""

        if added and removed:
            return f"OK, I've {added} to and {removed} from container {number}."
        if added:
            return f"OK, I've {added} to container {number}."
        if removed:
            return f"OK, I've {removed} from container {number}."
        return f"OK, no changes were made to container {number}."

    def _list_items(self, action: ListItems) -> str:
        number = action.container_number
        if not number:
            return FALLBACK_RESPONSE

        container = self.store.find(number)
        if container is None:
            return f"Sorry, I couldn't find container {number}."

        contents = ", ".join(container.items) if container.items else "It's empty"
        return f"Container {container.id} contains: {contents}."

    def _list_all(self) -> str:
        containers = self.store.snapshot()
        if not containers:
            return "You don't have any containers yet."

        lines = [
            f"Container #{c.id}: {', '.join(c.items) if c.items else '(empty)'}"
            for c in containers
        ]
        return "Here's what's in all your containers:\n\n" + "\n".join(lines)

    def _clear(self, action: ClearContainer) -> str:
        number = action.container_number
        if not number:
            return FALLBACK_RESPONSE
        if not self.store.clear(number):
            return f"Sorry, I couldn't find container {number}."
        return f"Container {number} has been cleared."

    def _create(self, action: CreateContainer) -> str:
        items = action.items or []
        new_id = self.store.create(items)
        if items:
            return f"I've created container {new_id} and added {_quoted(items)}."
        return f"I've created container {new_id}."

    def _delete(self, action: DeleteContainer) -> str:
        number = action.container_number
        if not number:
            return "Please specify which container you'd like to delete."
        if not self.store.delete(number):
            return f"Sorry, I couldn't find container #{number} to delete."
        return f"OK, I have deleted container #{number}."
