"""Actor and reactor base classes, and the actor-kind registration record."""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, NamedTuple

from shared.types import Item

if TYPE_CHECKING:
    from .reconciler import Reconciler


class Reactor(ABC):
    """A value derived from the whole item collection, recomputed once per pass.

    Reactors emit no patches and have no per-item identity.
    """

    @abstractmethod
    def update(self, items: list[Item]) -> None: ...


class Actor(ABC):
    """Manages the derived items for one source item.

    Constructed when the source item appears, updated on every later pass
    while it is present, deleted once it is gone.
    """

    def __init__(self, reconciler: "Reconciler"):
        self.reconciler = reconciler

    @abstractmethod
    def update(self, parent: Item) -> None: ...

    @abstractmethod
    def delete(self) -> None: ...

    def rollback(self) -> None:
        """Undo state changed by update() or delete() in a pass that failed."""


class ActorKind(NamedTuple):
    """How the reconciler recognises items for one actor type and builds its actors."""
    name: str
    matches: Callable[[Item], bool]
    factory: Callable[["Reconciler", Item], Actor]
    requires: tuple[type, ...] = ()
