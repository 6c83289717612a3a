"""Cardinal spline through a sequence of points.

The curve passes through every input point. Each interior point gets a pair
of control points pulled along the chord of its neighbours, scaled by
*tension* (0 gives straight lines).  Open curves start and end with a
quadratic span; everything in between is cubic.
"""
from .types import Point
from .geometry import add, subtract, multiply, distance, points_finite


def add_to_path(path, p: list[Point], tension: float = 0.5, closed: bool = True) -> None:
    """Append a spline through *p* to *path* (anything with move_to/line_to/quad_to/cubic_to/close)."""
    if len(p) == 0:
        return

    path.move_to(p[0])

    if tension != 0 and len(p) > 2:
        tp = get_tension_points(p, tension, closed)
        n_tp = len(tp)

        if not closed and n_tp > 1:
            _quad_to(path, tp[0], tp[1])

        for n in range(0 if closed else 2, n_tp - 1, 3):
            _bezier_curve_to(path, tp[n], tp[n+1], tp[n+2])

        if not closed and n_tp > 0:
            _quad_to(path, tp[-1], p[-1])
    else:
        for pt in p[1:]:
            path.line_to(pt)

    if closed:
        path.close()


def _quad_to(path, c: Point, p: Point) -> None:
    if points_finite((c, p)):
        path.quad_to(c, p)


def _bezier_curve_to(path, cp1: Point, cp2: Point, p: Point) -> None:
    if not points_finite((cp1, cp2, p)):
        return
    if path.is_empty():
        path.move_to(cp1)
    path.cubic_to(cp1, cp2, p)


def get_tension_points(p: list[Point], tension: float, closed: bool) -> list[Point]:
    """Flat list of control and anchor points consumed three at a time by add_to_path."""
    if closed:
        return get_tension_points_closed(p, tension)
    return expand_points(p, tension)


def get_tension_points_closed(p: list[Point], tension: float) -> list[Point]:
    first = get_control_points(p[-1], p[0], p[1], tension)
    last = get_control_points(p[-2], p[-1], p[0], tension)
    middle = expand_points(p, tension)
    return [first[1], *middle, last[0], p[-1], last[1], first[0], p[0]]


def expand_points(p: list[Point], tension: float) -> list[Point]:
    """[cp1, p[n], cp2] for every interior point, skipping triples with non-finite controls."""
    out: list[Point] = []
    for n in range(1, len(p) - 1):
        cp1, cp2 = get_control_points(p[n-1], p[n], p[n+1], tension)
        if not points_finite((cp1, cp2)):
            continue
        out.extend((cp1, p[n], cp2))
    return out


def get_control_points(p0: Point, p1: Point, p2: Point, t: float) -> tuple[Point, Point]:
    """Control points either side of *p1* for the triple (p0, p1, p2)."""
    d01 = distance(p0, p1)
    d12 = distance(p1, p2)

    d = d01 + d12
    if d <= 0:
        # coincident points: no direction to pull along
        return (p0[0], p0[1]), (p0[0], p0[1])

    fa = t*d01/d
    fb = t*d12/d

    p02 = subtract(p2, p0)
    return subtract(p1, multiply(p02, fa)), add(p1, multiply(p02, fb))
