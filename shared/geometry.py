"""Pure geometry functions: vector math, transforms, and curve sampling."""
import logging
import math
from typing import Callable, Iterable, Optional

import numpy as np

from .types import Point, PathCommand, Transform, Verb

logger = logging.getLogger(__name__)

SAMPLE_DISTANCE = 10.0     # default maximum step between sampled curve points
FLATTEN_SUBDIVISIONS = 64  # parameter steps used to estimate arc length

# ============================================================
# Error Type
# ============================================================
class GeometryError(ValueError):
    """Raised for impossible geometry operations."""

# ============================================================
# Vector Utilities
# ============================================================
def add(a: Point, b: Point) -> Point:
    return (a[0]+b[0], a[1]+b[1])

def subtract(a: Point, b: Point) -> Point:
    return (a[0]-b[0], a[1]-b[1])

def multiply(a: Point, k: float) -> Point:
    return (a[0]*k, a[1]*k)

def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0]-a[0], b[1]-a[1])

def all_finite(values: Iterable[float]) -> bool:
    """True if every value is a finite number."""
    return all(math.isfinite(v) for v in values)

def points_finite(points: Iterable[Point]) -> bool:
    return all(math.isfinite(p[0]) and math.isfinite(p[1]) for p in points)

# ============================================================
# Transforms
# ============================================================
def apply_transform(p: Point, t: Transform) -> Point:
    """Map a local point into the scene: scale, then rotate (degrees), then translate."""
    a = math.radians(t.rotation); c = math.cos(a); s = math.sin(a)
    x = p[0]*t.scale[0]; y = p[1]*t.scale[1]
    return (t.position[0] + x*c - y*s, t.position[1] + x*s + y*c)

def is_invertible(t: Transform) -> bool:
    sx, sy = t.scale
    return all_finite((sx, sy, t.rotation, *t.position)) and sx != 0 and sy != 0

def invert_transform(p: Point, t: Transform) -> Point:
    """Map a scene point back into the local frame of *t*. Raises GeometryError on zero scale."""
    if not is_invertible(t):
        raise GeometryError(f"Transform is not invertible: {t}")
    a = math.radians(t.rotation); c = math.cos(a); s = math.sin(a)
    dx = p[0]-t.position[0]; dy = p[1]-t.position[1]
    return ((dx*c + dy*s)/t.scale[0], (-dx*s + dy*c)/t.scale[1])

def transform_commands(commands: Iterable[PathCommand],
                       fn: Callable[[Point], Point]) -> list[PathCommand]:
    """Apply a point mapping to every command. Conic weights survive affine maps unchanged."""
    return [cmd._replace(points=tuple(fn(p) for p in cmd.points)) for cmd in commands]

# ============================================================
# Curve Sampling
# ============================================================
def command_point(cmd: PathCommand) -> Optional[Point]:
    """End point of a command, or None for CLOSE."""
    return cmd.points[-1] if cmd.points else None

def _eval_curve(anchor: Point, cmd: PathCommand, t: np.ndarray) -> np.ndarray:
    """Evaluate a QUAD/CONIC/CUBIC from *anchor* at parameters *t*. Returns (N, 2)."""
    ctrl = np.array((anchor, *cmd.points), dtype=float)
    t = t[:, None]; u = 1.0 - t
    if cmd.verb is Verb.QUAD:
        return u*u*ctrl[0] + 2*u*t*ctrl[1] + t*t*ctrl[2]
    if cmd.verb is Verb.CONIC:
        w = cmd.weight
        num = u*u*ctrl[0] + 2*w*u*t*ctrl[1] + t*t*ctrl[2]
        return num / (u*u + 2*w*u*t + t*t)
    return u**3*ctrl[0] + 3*u*u*t*ctrl[1] + 3*u*t*t*ctrl[2] + t**3*ctrl[3]

def sample_segment(anchor: Point, cmd: PathCommand, step: float = SAMPLE_DISTANCE) -> list[Point]:
    """Flatten one command starting at *anchor* into points spaced at most *step* apart.

    The anchor itself is not repeated; the end point is always the last point.
    MOVE/LINE pass their end point through unchanged. Non-finite input yields [].
    """
    if cmd.verb is Verb.CLOSE:
        return []
    if not points_finite(cmd.points):
        logger.debug("Skipping %s with non-finite coordinates", cmd.verb.name)
        return []
    end = cmd.points[-1]
    if cmd.verb in (Verb.MOVE, Verb.LINE):
        return [end]
    if not points_finite((anchor,)) or not (math.isfinite(step) and step > 0):
        logger.debug("Skipping %s: anchor=%s step=%s", cmd.verb.name, anchor, step)
        return []
    if cmd.verb is Verb.CONIC and not (math.isfinite(cmd.weight) and cmd.weight > 0):
        logger.debug("Skipping conic with weight %s", cmd.weight)
        return []

    fine = _eval_curve(anchor, cmd, np.linspace(0.0, 1.0, FLATTEN_SUBDIVISIONS+1))
    cum = np.concatenate(([0.0], np.cumsum(np.hypot(*np.diff(fine, axis=0).T))))
    length = float(cum[-1])
    if length <= 0.0:
        return [end]
    n = max(1, math.ceil(length/step))
    targets = np.linspace(0.0, length, n+1)[1:]
    xs = np.interp(targets, cum, fine[:, 0]); ys = np.interp(targets, cum, fine[:, 1])
    samples = [(float(x), float(y)) for x, y in zip(xs, ys)]
    samples[-1] = (float(end[0]), float(end[1]))
    return samples

def flatten_commands(commands: Iterable[PathCommand],
                     step: float = SAMPLE_DISTANCE) -> list[tuple[list[Point], bool]]:
    """Split a command stream into sub-paths of points: [(points, closed), ...].

    A drawing command with no current point continues from the last move point.
    """
    subpaths: list[tuple[list[Point], bool]] = []
    pts: list[Point] = []
    start: Optional[Point] = None
    for cmd in commands:
        if cmd.verb is Verb.MOVE:
            if len(pts) > 1:
                subpaths.append((pts, False))
            pts = []; start = None
            if points_finite(cmd.points):
                start = cmd.points[-1]; pts = [start]
        elif cmd.verb is Verb.CLOSE:
            if pts:
                subpaths.append((pts, True))
            pts = []
        else:
            if not pts:
                if start is None:
                    continue
                pts = [start]
            pts.extend(sample_segment(pts[-1], cmd, step))
    if len(pts) > 1:
        subpaths.append((pts, False))
    return subpaths
