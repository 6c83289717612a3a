"""Keeps actor-managed items in step with a live item collection.

Each pass:

1. every reactor recomputes its value from the full collection;
2. actors whose source item is gone (or no longer matches) are deleted;
3. new matching items get an actor;
4. every other surviving actor is updated;
5. the patches gathered in 2-4 are applied to the store as one batch.

Passes never interleave. A change that arrives while a pass is running
(the batch apply itself notifies) is held and replayed afterwards with the
latest snapshot. A pass that raises leaves the store untouched and rolls
its actors back with Actor.rollback().
"""
import logging
from typing import Optional, TypeVar

from shared.types import Item
from .actor import Actor, ActorKind, Reactor
from .errors import WiringError
from .patcher import ItemStore, Patcher

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Reactor)
ActorKey = tuple[str, str]   # (actor kind name, source item id)


class Reconciler:
    def __init__(self, store: ItemStore, engine=None):
        self.store = store
        self.engine = engine
        self.patcher = Patcher()
        self._reactors: dict[type, Reactor] = {}
        self._kinds: dict[str, ActorKind] = {}
        self._actors: dict[ActorKey, Actor] = {}
        self._running = False
        self._pending: Optional[list[Item]] = None

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------
    def register_reactor(self, reactor: Reactor) -> None:
        if type(reactor) in self._reactors:
            raise WiringError(f"{type(reactor).__name__} is already registered")
        self._reactors[type(reactor)] = reactor

    def register_actor(self, kind: ActorKind) -> None:
        """Register an actor kind. Its required reactors must already be registered."""
        if kind.name in self._kinds:
            raise WiringError(f"Actor kind '{kind.name}' is already registered")
        for reactor_type in kind.requires:
            if reactor_type not in self._reactors:
                raise WiringError(
                    f"Actor kind '{kind.name}' requires {reactor_type.__name__}, which is not registered"
                )
        self._kinds[kind.name] = kind

    def find(self, reactor_type: type[R]) -> R:
        """Registered reactor of the given type. Raises WiringError if absent."""
        try:
            return self._reactors[reactor_type]
        except KeyError:
            raise WiringError(f"{reactor_type.__name__} is not registered") from None

    def actor(self, kind_name: str, item_id: str) -> Optional[Actor]:
        return self._actors.get((kind_name, item_id))

    def actor_keys(self) -> list[ActorKey]:
        return list(self._actors)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------
    def reconcile(self, items: list[Item]) -> None:
        if self._running:
            self._pending = list(items)
            return
        self._running = True
        try:
            batch: Optional[list[Item]] = list(items)
            while batch is not None:
                self._pass(batch)
                batch, self._pending = self._pending, None
        finally:
            self._running = False
            self._pending = None

    def _pass(self, items: list[Item]) -> None:
        for reactor in self._reactors.values():
            reactor.update(items)

        wanted: dict[ActorKey, Item] = {}
        for item in items:
            for kind in self._kinds.values():
                if kind.matches(item):
                    wanted[(kind.name, item.id)] = item

        created: set[ActorKey] = set()
        touched: list[tuple[ActorKey, Actor]] = []
        try:
            for key in [k for k in self._actors if k not in wanted]:
                logger.debug("Deleting actor %s", key)
                actor = self._actors.pop(key)
                touched.append((key, actor))
                actor.delete()

            for key, item in wanted.items():
                if key not in self._actors:
                    logger.debug("Creating actor %s", key)
                    self._actors[key] = self._kinds[key[0]].factory(self, item)
                    created.add(key)

            for key, item in wanted.items():
                if key not in created:
                    touched.append((key, self._actors[key]))
                    self._actors[key].update(item)
        except Exception:
            # nothing from a failed pass reaches the store: actors go back to their
            # state before the pass and new ones are retried next pass
            for key in created:
                self._actors.pop(key, None)
            for key, actor in touched:
                actor.rollback()
                self._actors[key] = actor
            self.patcher.clear()
            raise

        self.patcher.apply(self.store)

    def clear(self) -> None:
        """Forget every actor without emitting patches (the scene went away)."""
        logger.debug("Clearing %d actor(s)", len(self._actors))
        self._actors.clear()
        self.patcher.clear()
        self._pending = None
