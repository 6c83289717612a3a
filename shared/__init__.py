"""Shared types, geometry, splines, path construction, path engine, and scene."""

from .types import (
    Point, Contour, Verb, PathCommand, move, line, quad, conic, cubic, close,
    Transform, Style, Item, Shape, Line, Curve, VectorPath, Wall, Drawing,
    is_drawing, is_shape, is_wall,
)
from .geometry import (
    GeometryError, SAMPLE_DISTANCE,
    add, subtract, multiply, distance, all_finite, points_finite,
    apply_transform, invert_transform, is_invertible, transform_commands,
    command_point, sample_segment, flatten_commands,
)
from .paths import PathBuilder, drawing_path_commands
from .engine import ShapelyEngine, ShapelyPath, StrokeCap, StrokeJoin
from .scene import Scene, SceneItems
from .log import setup_logging
