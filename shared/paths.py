"""Path construction: a command builder and drawing-to-commands conversion.

Commands are produced in the drawing's local frame; the item's
position/rotation/scale are applied by whoever consumes them.
"""
import math

from .types import (
    Point, PathCommand, Drawing, Shape, Line, Curve, VectorPath,
    move, line, quad, conic, cubic, close,
)
from . import spline

_QUARTER_ARC_WEIGHT = math.sqrt(2) / 2


class PathBuilder:
    """Accumulates PathCommands with a canvas-style API."""

    def __init__(self):
        self.commands: list[PathCommand] = []

    def is_empty(self) -> bool:
        return not self.commands

    def move_to(self, p: Point) -> "PathBuilder":
        self.commands.append(move(p)); return self

    def line_to(self, p: Point) -> "PathBuilder":
        self.commands.append(line(p)); return self

    def quad_to(self, c: Point, p: Point) -> "PathBuilder":
        self.commands.append(quad(c, p)); return self

    def conic_to(self, c: Point, p: Point, w: float) -> "PathBuilder":
        self.commands.append(conic(c, p, w)); return self

    def cubic_to(self, c1: Point, c2: Point, p: Point) -> "PathBuilder":
        self.commands.append(cubic(c1, c2, p)); return self

    def close(self) -> "PathBuilder":
        self.commands.append(close()); return self

    def polygon(self, pts: list[Point]) -> "PathBuilder":
        """Closed polyline through *pts*."""
        if pts:
            self.move_to(pts[0])
            for p in pts[1:]:
                self.line_to(p)
            self.close()
        return self


# ============================================================
# Shapes
# ============================================================
def _shape_commands(shape: Shape) -> list[PathCommand]:
    w, h = shape.width, shape.height
    b = PathBuilder()
    if shape.shape_type == "RECTANGLE":
        b.polygon([(0.0, 0.0), (w, 0.0), (w, h), (0.0, h)])
    elif shape.shape_type == "CIRCLE":
        rx, ry = w/2, h/2; k = _QUARTER_ARC_WEIGHT
        b.move_to((rx, 0.0))
        b.conic_to((rx, ry), (0.0, ry), k).conic_to((-rx, ry), (-rx, 0.0), k)
        b.conic_to((-rx, -ry), (0.0, -ry), k).conic_to((rx, -ry), (rx, 0.0), k)
        b.close()
    elif shape.shape_type == "TRIANGLE":
        b.polygon([(0.0, 0.0), (-w/2, h), (w/2, h)])
    elif shape.shape_type == "HEXAGON":
        rx, ry = w/2, h/2
        b.polygon([(rx*math.cos(math.radians(60*i)), ry*math.sin(math.radians(60*i)))
                   for i in range(6)])
    return b.commands


def drawing_path_commands(drawing: Drawing) -> list[PathCommand]:
    """Local-frame path commands for a drawing. Unknown drawings give []."""
    if isinstance(drawing, Shape):
        return _shape_commands(drawing)
    if isinstance(drawing, Line):
        return [move(drawing.start_position), line(drawing.end_position)]
    if isinstance(drawing, Curve):
        b = PathBuilder()
        spline.add_to_path(b, list(drawing.points), drawing.tension, drawing.closed)
        return b.commands
    if isinstance(drawing, VectorPath):
        return list(drawing.commands)
    return []
