"""Drawing to wall contours: stroke the outline, cut doors out, walk the result."""
import logging
from typing import Iterable, Optional

from shared.types import Contour, Drawing, PathCommand, Transform, Verb, Point, is_shape
from shared.geometry import (
    command_point, sample_segment, points_finite,
    invert_transform, is_invertible, transform_commands,
)
from shared.paths import drawing_path_commands
from shared.engine import ShapelyEngine, ShapelyPath, StrokeCap, StrokeJoin
from walls.constants import SAMPLE_DISTANCE, MITRE_LIMIT
from walls.doors import DoorCutout

logger = logging.getLogger(__name__)


def drawing_to_contours(
    drawing: Drawing,
    engine: ShapelyEngine,
    doors: Iterable[DoorCutout] = (),
    sample_distance: float = SAMPLE_DISTANCE,
) -> list[Contour]:
    """Convert a drawing into a list of contours.

    Each contour is a list of points forming one continuous curve. A path
    with several inner shapes, or a stroke split by a door, gives several
    contours. Straight spans come through exactly; curved spans are
    sampled every *sample_distance*.
    """
    commands = stroked_commands(drawing, engine, doors, sample_distance)
    if not commands:
        return []
    return commands_to_contours(commands, sample_distance)


def stroked_commands(drawing: Drawing, engine: ShapelyEngine,
                     doors: Iterable[DoorCutout] = (),
                     sample_distance: float = SAMPLE_DISTANCE) -> list[PathCommand]:
    """Commands of the drawing's stroke outline with every door removed (local frame).

    Curved spans of the outline (flattened curves, round caps and joins)
    have no step longer than *sample_distance*.
    """
    source = drawing_path_commands(drawing)
    if not source:
        return []
    shape = is_shape(drawing)
    # offsetting a flattened curve stretches its segments (mitre joins by up to 2x)
    flatten_step = sample_distance / 2
    with engine.path_from_commands(source, flatten_step=flatten_step) as path:
        path.stroke(
            drawing.style.stroke_width,
            cap=StrokeCap.SQUARE if shape else StrokeCap.ROUND,
            join=StrokeJoin.MITER if shape else StrokeJoin.ROUND,
            mitre_limit=MITRE_LIMIT,
            max_step=sample_distance,
        )
        subtract_doors(path, doors, drawing.transform, engine, flatten_step)
        return path.to_commands()


def subtract_doors(path: ShapelyPath, doors: Iterable[DoorCutout], transform: Transform,
                   engine: ShapelyEngine, flatten_step: Optional[float] = None) -> None:
    """Remove each door from *path*. Doors are mapped into the frame of *transform* first."""
    doors = list(doors)
    if not doors:
        return
    if not is_invertible(transform):
        logger.debug("Skipping %d door(s): transform %s is not invertible", len(doors), transform)
        return
    for door in doors:
        local = transform_commands(door.commands, lambda p: invert_transform(p, transform))
        with engine.path_from_commands(local, filled=True, flatten_step=flatten_step) as cutout:
            path.op_difference(cutout)


def _append(points: list[Point], p) -> None:
    if p is not None and points_finite((p,)):
        points.append(p)


def commands_to_contours(commands: list[PathCommand],
                         sample_distance: float = SAMPLE_DISTANCE) -> list[Contour]:
    """Walk a command stream into contours.

    MOVE/LINE add their point. Curves are sampled from the previous
    command's point. CLOSE adds the contour's first point and ends the
    contour. Points left over at the end form a final open contour.
    """
    contours: list[Contour] = []
    points: Contour = []
    start_index = 0   # index of the command that began the current contour
    for index, cmd in enumerate(commands):
        prev_cmd = commands[max(index - 1, start_index)]
        if cmd.verb in (Verb.MOVE, Verb.LINE):
            _append(points, command_point(cmd))
        elif cmd.verb in (Verb.QUAD, Verb.CONIC, Verb.CUBIC):
            anchor = command_point(prev_cmd)
            if anchor is not None:
                points.extend(sample_segment(anchor, cmd, sample_distance))
        elif cmd.verb is Verb.CLOSE:
            _append(points, command_point(commands[start_index]))
            # a close with no valid points yields no contour
            if points:
                contours.append(points)
            points = []
            start_index = index + 1

    if points:
        # no trailing close
        contours.append(points)

    return contours
