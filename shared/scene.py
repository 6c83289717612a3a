"""In-memory scene: an item collection with change notification and a ready flag."""
import copy
import logging
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator

from .types import Item, ItemMutator

logger = logging.getLogger(__name__)

ItemsListener = Callable[[list[Item]], None]
ReadyListener = Callable[[bool], None]


def _unsubscriber(listeners: list, cb) -> Callable[[], None]:
    def unsubscribe() -> None:
        if cb in listeners:
            listeners.remove(cb)
    return unsubscribe


class SceneItems:
    """Item store. Listeners receive a snapshot after every effective change.

    Changes made inside ``batch()`` produce a single notification on exit.
    """

    def __init__(self, items: Iterable[Item] = ()):
        self._items: dict[str, Item] = {}
        for item in items:
            self._items[item.id] = copy.deepcopy(item)
        self._listeners: list[ItemsListener] = []
        self._batch_depth = 0
        self._dirty = False

    def get_items(self) -> list[Item]:
        return [copy.deepcopy(item) for item in self._items.values()]

    def get_item(self, item_id: str) -> Item | None:
        item = self._items.get(item_id)
        return copy.deepcopy(item) if item is not None else None

    def on_change(self, cb: ItemsListener) -> Callable[[], None]:
        self._listeners.append(cb)
        return _unsubscriber(self._listeners, cb)

    def create_items(self, *items: Item) -> None:
        for item in items:
            if item.id in self._items:
                logger.warning("Replacing existing item %s", item.id)
            self._items[item.id] = copy.deepcopy(item)
        if items:
            self._changed()

    def update_items(self, updates: Iterable[tuple[str, ItemMutator]]) -> None:
        changed = False
        for item_id, mutator in updates:
            current = self._items.get(item_id)
            if current is None:
                logger.warning("Update for unknown item %s ignored", item_id)
                continue
            draft = copy.deepcopy(current)
            mutator(draft)
            if draft != current:
                self._items[item_id] = draft
                changed = True
        if changed:
            self._changed()

    def delete_items(self, *ids: str) -> None:
        """Delete items and, transitively, everything attached to them. Unknown ids are ignored."""
        doomed = {i for i in ids if i in self._items}
        frontier = set(doomed)
        while frontier:
            frontier = {item.id for item in self._items.values()
                        if item.attached_to in frontier and item.id not in doomed}
            doomed |= frontier
        for item_id in doomed:
            del self._items[item_id]
        if doomed:
            self._changed()

    @contextmanager
    def batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._notify()

    def _changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
        else:
            self._notify()

    def _notify(self) -> None:
        snapshot = self.get_items()
        for cb in list(self._listeners):
            cb(snapshot)


class Scene:
    """A scene that may or may not be ready, holding a SceneItems collection."""

    def __init__(self, items: Iterable[Item] = (), ready: bool = False):
        self.items = SceneItems(items)
        self._ready = ready
        self._ready_listeners: list[ReadyListener] = []

    def is_ready(self) -> bool:
        return self._ready

    def on_ready_change(self, cb: ReadyListener) -> Callable[[], None]:
        self._ready_listeners.append(cb)
        return _unsubscriber(self._ready_listeners, cb)

    def set_ready(self, ready: bool) -> None:
        if ready == self._ready:
            return
        self._ready = ready
        for cb in list(self._ready_listeners):
            cb(ready)
