"""Shapely-backed path engine: build, stroke, subtract, and read back paths.

Paths are handles owned by the caller. Every handle must be released with
``delete()`` (or by using it as a context manager); the engine counts live
handles so leaks show up in tests.
"""
import logging
import math
from enum import Enum
from typing import Iterator, Optional

from shapely.geometry import GeometryCollection, LinearRing, LineString, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from .types import Point, PathCommand, move, line, close
from .geometry import GeometryError, flatten_commands

logger = logging.getLogger(__name__)

FLATTEN_STEP = 2.0     # curve sampling step used when building native paths
BUFFER_QUAD_SEGS = 8   # segments per quarter circle for round caps/joins
MITRE_LIMIT = 4.0


class StrokeCap(Enum):
    BUTT = "flat"
    ROUND = "round"
    SQUARE = "square"


class StrokeJoin(Enum):
    MITER = "mitre"
    ROUND = "round"
    BEVEL = "bevel"


def _dedupe(pts: list[Point]) -> list[Point]:
    """Drop consecutive duplicate points."""
    out: list[Point] = []
    for p in pts:
        if not out or p != out[-1]:
            out.append(p)
    return out


def _parts(geom: BaseGeometry) -> Iterator[BaseGeometry]:
    """Flatten multi-geometries and collections into simple parts."""
    if geom.is_empty:
        return
    if hasattr(geom, "geoms"):
        for g in geom.geoms:
            yield from _parts(g)
    else:
        yield geom


def _ring_commands(coords) -> list[PathCommand]:
    pts = _dedupe([(float(x), float(y)) for x, y, *_ in coords])
    if len(pts) > 1 and pts[0] == pts[-1]:
        pts.pop()
    if len(pts) < 3:
        return []
    return [move(pts[0]), *(line(p) for p in pts[1:]), close()]


class ShapelyPath:
    """A native path handle. Operations mutate the handle in place."""

    def __init__(self, engine: "ShapelyEngine", geom: BaseGeometry):
        self._engine = engine
        self._geom: Optional[BaseGeometry] = geom
        engine.live_handles += 1

    def __enter__(self) -> "ShapelyPath":
        return self

    def __exit__(self, *exc) -> None:
        self.delete()

    @property
    def geometry(self) -> BaseGeometry:
        if self._geom is None:
            raise GeometryError("Path handle used after delete()")
        return self._geom

    @property
    def deleted(self) -> bool:
        return self._geom is None

    def is_empty(self) -> bool:
        return self.geometry.is_empty

    def stroke(self, width: float, cap: StrokeCap = StrokeCap.ROUND,
               join: StrokeJoin = StrokeJoin.ROUND, mitre_limit: float = MITRE_LIMIT,
               max_step: Optional[float] = None) -> "ShapelyPath":
        """Replace the path with the outline of its stroke.

        With *max_step*, round caps and joins are split finely enough that no
        chord of their arcs is longer than it.
        """
        parts = list(_parts(self.geometry))
        if not (math.isfinite(width) and width > 0) or not parts:
            self._geom = Polygon()
            return self
        quad_segs = self._engine.quad_segs
        if max_step is not None and math.isfinite(max_step) and max_step > 0:
            quad_segs = max(1, math.ceil((math.pi/2) * (width/2) / max_step))
        self._geom = unary_union([
            g.buffer(width/2, quad_segs=quad_segs,
                     cap_style=cap.value, join_style=join.value, mitre_limit=mitre_limit)
            for g in parts
        ])
        return self

    def op_difference(self, other: "ShapelyPath") -> "ShapelyPath":
        """Subtract *other* from this path."""
        self._geom = self.geometry.difference(other.geometry)
        return self

    def to_commands(self) -> list[PathCommand]:
        """Read the path back as MOVE/LINE/CLOSE commands, one closed contour per ring."""
        commands: list[PathCommand] = []
        for g in _parts(self.geometry):
            if isinstance(g, Polygon):
                commands.extend(_ring_commands(g.exterior.coords))
                for interior in g.interiors:
                    commands.extend(_ring_commands(interior.coords))
            elif isinstance(g, LinearRing):
                commands.extend(_ring_commands(g.coords))
            elif isinstance(g, LineString):
                pts = _dedupe([(float(x), float(y)) for x, y, *_ in g.coords])
                if len(pts) > 1:
                    commands.append(move(pts[0])); commands.extend(line(p) for p in pts[1:])
        return commands

    def delete(self) -> None:
        if self._geom is not None:
            self._geom = None
            self._engine.live_handles -= 1


class ShapelyEngine:
    """Factory for ShapelyPath handles."""

    def __init__(self, flatten_step: float = FLATTEN_STEP, quad_segs: int = BUFFER_QUAD_SEGS):
        self.flatten_step = flatten_step
        self.quad_segs = quad_segs
        self.live_handles = 0

    def path_from_commands(self, commands: list[PathCommand], filled: bool = False,
                           flatten_step: Optional[float] = None) -> ShapelyPath:
        """Build a path. Filled paths are regions (even-odd); unfilled paths are centrelines.

        Curves are flattened every *flatten_step* (the engine default if None).
        """
        step = self.flatten_step if flatten_step is None else flatten_step
        subpaths = [(_dedupe(pts), closed) for pts, closed in flatten_commands(commands, step)]
        if filled:
            region: BaseGeometry = Polygon()
            for pts, _ in subpaths:
                if len(pts) < 3:
                    continue
                poly = Polygon(pts)
                if not poly.is_valid:
                    poly = poly.buffer(0)
                region = region.symmetric_difference(poly)
            return ShapelyPath(self, region)

        parts: list[BaseGeometry] = []
        for pts, closed in subpaths:
            if closed and len(pts) > 1 and pts[0] == pts[-1]:
                pts = pts[:-1]
            if closed and len(pts) >= 3:
                parts.append(LinearRing(pts))
            elif len(pts) >= 2:
                parts.append(LineString(pts))
            else:
                logger.debug("Dropping degenerate sub-path with %d point(s)", len(pts))
        return ShapelyPath(self, GeometryCollection(parts))
