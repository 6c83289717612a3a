"""Shared test fixtures for wall sync tests."""
import pytest
from shared.engine import ShapelyEngine
from shared.scene import SceneItems
from walls.sync import build_wall_reconciler


class RecordingItems(SceneItems):
    """SceneItems that remembers every create/update/delete call and notification."""

    def __init__(self, items=()):
        super().__init__(items)
        self.created: list[str] = []
        self.updated: list[str] = []
        self.deleted: list[str] = []
        self.notifications = 0
        self.on_change(self._count)

    def _count(self, items):
        self.notifications += 1

    def create_items(self, *items):
        self.created.extend(item.id for item in items)
        super().create_items(*items)

    def update_items(self, updates):
        updates = list(updates)
        self.updated.extend(item_id for item_id, _ in updates)
        super().update_items(updates)

    def delete_items(self, *ids):
        self.deleted.extend(ids)
        super().delete_items(*ids)


@pytest.fixture
def engine():
    """Fresh path engine; tests may check live_handles afterwards."""
    return ShapelyEngine()


@pytest.fixture
def items():
    return RecordingItems()


@pytest.fixture
def reconciler(items, engine):
    """Wall reconciler writing into the recording store."""
    return build_wall_reconciler(items, engine)
