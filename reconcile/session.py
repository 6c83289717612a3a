"""Scene session: ties a reconciler to a scene's readiness and item changes.

Every readiness transition first cancels all subscriptions made by the
previous session, then either starts a new one (ready) or clears the
reconciler (not ready).
"""
import logging
from typing import Callable

from shared.scene import Scene
from shared.types import Item
from .reconciler import Reconciler

logger = logging.getLogger(__name__)


class SceneSession:
    def __init__(self, scene: Scene, reconciler: Reconciler):
        self.scene = scene
        self.reconciler = reconciler
        self._scene_subscriptions: list[Callable[[], None]] = []
        self._unsubscribe_ready: Callable[[], None] | None = None

    @property
    def active(self) -> bool:
        return bool(self._scene_subscriptions)

    def start(self) -> None:
        if self._unsubscribe_ready is not None:
            return
        self._unsubscribe_ready = self.scene.on_ready_change(self.handle_scene_ready)
        self.handle_scene_ready(self.scene.is_ready())

    def stop(self) -> None:
        if self._unsubscribe_ready is not None:
            self._unsubscribe_ready()
            self._unsubscribe_ready = None
        self._teardown()
        self.reconciler.clear()

    def handle_scene_ready(self, ready: bool) -> None:
        self._teardown()
        if ready:
            logger.info("Scene ready, starting wall sync")
            self._scene_subscriptions.append(self.scene.items.on_change(self.handle_items_change))
            self.handle_items_change(self.scene.items.get_items())
        else:
            logger.info("Scene unavailable, clearing actors")
            self.reconciler.clear()

    def handle_items_change(self, items: list[Item]) -> None:
        self.reconciler.reconcile(items)

    def _teardown(self) -> None:
        for unsubscribe in self._scene_subscriptions:
            unsubscribe()
        self._scene_subscriptions = []
