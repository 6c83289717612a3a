"""Collects item patches during a pass and applies them as one batch."""
import logging
from typing import Protocol

from shared.types import Item, ItemMutator

logger = logging.getLogger(__name__)


class ItemStore(Protocol):
    def create_items(self, *items: Item) -> None: ...
    def update_items(self, updates: list[tuple[str, ItemMutator]]) -> None: ...
    def delete_items(self, *ids: str) -> None: ...
    def batch(self): ...


class Patcher:
    def __init__(self):
        self.adds: list[Item] = []
        self.updates: list[tuple[str, ItemMutator]] = []
        self.deletes: list[str] = []

    def add_items(self, *items: Item) -> None:
        self.adds.extend(items)

    def update_items(self, *updates: tuple[str, ItemMutator]) -> None:
        self.updates.extend(updates)

    def delete_items(self, *ids: str) -> None:
        self.deletes.extend(ids)

    def is_empty(self) -> bool:
        return not (self.adds or self.updates or self.deletes)

    def clear(self) -> None:
        self.adds = []; self.updates = []; self.deletes = []

    def apply(self, store: ItemStore) -> None:
        """Creates, then updates, then deletes, inside one store batch. The patcher is emptied."""
        if self.is_empty():
            return
        adds, updates, deletes = self.adds, self.updates, self.deletes
        self.clear()
        logger.debug("Applying patch: %d add(s), %d update(s), %d delete(s)",
                     len(adds), len(updates), len(deletes))
        with store.batch():
            if adds:
                store.create_items(*adds)
            if updates:
                store.update_items(updates)
            if deletes:
                store.delete_items(*deletes)
