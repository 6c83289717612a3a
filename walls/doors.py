"""Door cutouts: the regions every door drawing removes from wall strokes."""
import logging
from typing import NamedTuple

from shared.types import PathCommand, Item, Drawing, Shape, Curve, VectorPath, Verb, is_drawing
from shared.geometry import apply_transform, transform_commands
from shared.paths import drawing_path_commands
from shared.engine import ShapelyEngine
from reconcile.actor import Reactor
from walls.constants import DOOR_KEY

logger = logging.getLogger(__name__)


class DoorCutout(NamedTuple):
    """Closed outline of one door, in scene coordinates. Filled even-odd when subtracted."""
    id: str
    commands: tuple[PathCommand, ...]


def is_door(item: Item) -> bool:
    return is_drawing(item) and bool(item.metadata.get(DOOR_KEY))


def _encloses_region(drawing: Drawing) -> bool:
    if isinstance(drawing, Shape):
        return True
    if isinstance(drawing, Curve):
        return drawing.closed
    if isinstance(drawing, VectorPath):
        return any(cmd.verb is Verb.CLOSE for cmd in drawing.commands)
    return False


def door_cutout(drawing: Drawing, engine: ShapelyEngine) -> DoorCutout:
    """Cutout for a door drawing.

    Closed drawings cut their filled outline. Open ones (lines, open curves)
    cut the area covered by their stroke.
    """
    commands = drawing_path_commands(drawing)
    if commands and not _encloses_region(drawing):
        with engine.path_from_commands(commands) as path:
            path.stroke(drawing.style.stroke_width)
            commands = path.to_commands()
    world = transform_commands(commands, lambda p: apply_transform(p, drawing.transform))
    return DoorCutout(drawing.id, tuple(world))


class DoorReactor(Reactor):
    """Cutouts for every door in the scene, rebuilt once per pass."""

    def __init__(self, engine: ShapelyEngine):
        self.engine = engine
        self._doors: tuple[DoorCutout, ...] = ()

    def update(self, items: list[Item]) -> None:
        self._doors = tuple(door_cutout(item, self.engine) for item in items if is_door(item))
        if self._doors:
            logger.debug("%d door cutout(s)", len(self._doors))

    def get_doors(self) -> tuple[DoorCutout, ...]:
        return self._doors
