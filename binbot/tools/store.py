"""In-memory container store."""

from typing import Iterable, Iterator, Optional

from binbot.models import Container


def _dedupe(items: Iterable[str]) -> list[str]:
    """Drop exact duplicates, keeping first-occurrence order."""
    return list(dict.fromkeys(items))


class ContainerStore:
    """Owns the session's containers.

    Every operation is total: lookups of unknown ids return None or False
    rather than raising.
    """

    def __init__(self, seed: Optional[Iterable[tuple[int, list[str]]]] = None):
        """Initialize store.

        Args:
            seed: Optional (id, items) pairs to start with
        """
        self._containers: list[Container] = []
        for container_id, items in seed or []:
            self._containers.append(Container(id=container_id, items=_dedupe(items)))

    def __len__(self) -> int:
        return len(self._containers)

    def __iter__(self) -> Iterator[Container]:
        return iter(self.snapshot())

    def ids(self) -> list[int]:
        return [c.id for c in self._containers]

    def max_id(self) -> int:
        """Highest container id, or 0 when the store is empty."""
        return max(self.ids(), default=0)

    def snapshot(self) -> list[Container]:
        """Copies of all containers, in creation order."""
        return [c.copy() for c in self._containers]

    def find(self, container_id: int) -> Optional[Container]:
        """Find a container by id.

        Returns:
            A copy of the container, or None if absent
        """
        container = self._get(container_id)
        return container.copy() if container else None

    def create(self, items: Optional[list[str]] = None) -> int:
        """Create a container with the next free id.

        Args:
            items: Optional initial items

        Returns:
            The new container's id
        """
        new_id = self.max_id() + 1
        self._containers.append(Container(id=new_id, items=_dedupe(items or [])))
        return new_id

    def update(
        self,
        container_id: int,
        to_add: Optional[list[str]] = None,
        to_remove: Optional[list[str]] = None,
    ) -> Optional[Container]:
        """Remove and then add items.

        An existing item is removed when its lowercase form contains any
        lowercase removal term. Additions are appended and the result is
        de-duplicated by exact match.

        Args:
            container_id: Container to update
            to_add: Items to add
            to_remove: Removal terms

        Returns:
            A copy of the updated container, or None if absent
        """
        container = self._get(container_id)
        if container is None:
            return None

        items = list(container.items)
        if to_remove:
            terms = [term.lower() for term in to_remove]
            items = [item for item in items if not any(t in item.lower() for t in terms)]
        if to_add:
            items = _dedupe(items + list(to_add))

        container.items = items
        return container.copy()

    def clear(self, container_id: int) -> bool:
        """Empty a container. Returns False if it does not exist."""
        container = self._get(container_id)
        if container is None:
            return False
        container.items = []
        return True

    def delete(self, container_id: int) -> bool:
        """Delete a container. Returns True if it existed."""
        before = len(self._containers)
        self._containers = [c for c in self._containers if c.id != container_id]
        return len(self._containers) != before

    def _get(self, container_id: int) -> Optional[Container]:
        for container in self._containers:
            if container.id == container_id:
                return container
        return None
