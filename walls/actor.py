"""Wall actor: keeps one wall per contour of its drawing."""
import uuid
from dataclasses import replace
from typing import NamedTuple

from shared.types import Contour, Drawing, Item, Transform, Wall, is_drawing, is_wall
from reconcile.actor import Actor, ActorKind
from walls.constants import WALL_KEY
from walls.contours import drawing_to_contours
from walls.doors import DoorReactor


class WallDiff(NamedTuple):
    """Changes needed to turn the current walls into one wall per contour.

    Walls are matched to contours by position. Extra contours become new
    walls at the end; extra trailing walls are deleted.
    """
    created: list[Contour]
    updated_at: list[tuple[int, Contour]]
    deleted_ids: list[str]


def diff_walls(prev_ids: list[str], contours: list[Contour]) -> WallDiff:
    keep = min(len(prev_ids), len(contours))
    return WallDiff(
        created=list(contours[keep:]),
        updated_at=list(enumerate(contours[:keep])),
        deleted_ids=list(prev_ids[keep:]),
    )


def build_wall(drawing: Drawing, contour: Contour) -> Wall:
    return Wall(
        id=str(uuid.uuid4()),
        points=list(contour),
        attached_to=drawing.id,
        position=drawing.position,
        rotation=drawing.rotation,
        scale=drawing.scale,
    )


def _set_wall(contour: Contour, transform: Transform):
    def mutate(item: Item) -> None:
        if is_wall(item):
            item.points = list(contour)
            item.position, item.rotation, item.scale = transform
    return mutate


def is_wall_source(item: Item) -> bool:
    return is_drawing(item) and bool(item.metadata.get(WALL_KEY))


class WallActor(Actor):
    def __init__(self, reconciler, parent: Item):
        super().__init__(reconciler)
        self.door: DoorReactor = reconciler.find(DoorReactor)
        self.walls: list[Wall] = []
        self._walls_before: list[Wall] = []
        if is_drawing(parent):
            self.walls = [build_wall(parent, c) for c in self._contours(parent)]
            if self.walls:
                self.reconciler.patcher.add_items(*self.walls)

    def update(self, parent: Item) -> None:
        self._walls_before = list(self.walls)
        if not is_drawing(parent):
            return
        patcher = self.reconciler.patcher
        diff = diff_walls([wall.id for wall in self.walls], self._contours(parent))

        if diff.deleted_ids:
            del self.walls[len(self.walls) - len(diff.deleted_ids):]
            patcher.delete_items(*diff.deleted_ids)

        for i, contour in diff.updated_at:
            wall = self.walls[i]
            self.walls[i] = replace(wall, points=list(contour), position=parent.position,
                                    rotation=parent.rotation, scale=parent.scale)
            patcher.update_items((wall.id, _set_wall(contour, parent.transform)))

        for contour in diff.created:
            wall = build_wall(parent, contour)
            self.walls.append(wall)
            patcher.add_items(wall)

    def delete(self) -> None:
        self._walls_before = list(self.walls)
        if self.walls:
            self.reconciler.patcher.delete_items(*(wall.id for wall in self.walls))
        self.walls = []

    def rollback(self) -> None:
        self.walls = self._walls_before

    def _contours(self, drawing: Drawing) -> list[Contour]:
        return drawing_to_contours(drawing, self.reconciler.engine, self.door.get_doors())


WALL_KIND = ActorKind("wall", is_wall_source, WallActor, requires=(DoorReactor,))
