"""Shared type definitions: points, path commands and scene items."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, NamedTuple, Optional

Point = tuple[float, float]
Contour = list[Point]

# ============================================================
# Path Commands
# ============================================================
class Verb(Enum):
    MOVE = "M"
    LINE = "L"
    QUAD = "Q"
    CONIC = "K"
    CUBIC = "C"
    CLOSE = "Z"

class PathCommand(NamedTuple):
    """One drawing command. *points* holds control points first, end point last."""
    verb: Verb
    points: tuple[Point, ...] = ()
    weight: float = 1.0

def move(p: Point) -> PathCommand:
    return PathCommand(Verb.MOVE, (p,))

def line(p: Point) -> PathCommand:
    return PathCommand(Verb.LINE, (p,))

def quad(c: Point, p: Point) -> PathCommand:
    return PathCommand(Verb.QUAD, (c, p))

def conic(c: Point, p: Point, w: float) -> PathCommand:
    return PathCommand(Verb.CONIC, (c, p), w)

def cubic(c1: Point, c2: Point, p: Point) -> PathCommand:
    return PathCommand(Verb.CUBIC, (c1, c2, p))

def close() -> PathCommand:
    return PathCommand(Verb.CLOSE)

# ============================================================
# Scene Items
# ============================================================
class Transform(NamedTuple):
    position: Point = (0.0, 0.0)
    rotation: float = 0.0          # degrees
    scale: Point = (1.0, 1.0)

class Style(NamedTuple):
    stroke_width: float = 5.0

@dataclass
class Item:
    """Base scene item. Position/rotation/scale place the local frame in the scene."""
    id: str
    type: str = "ITEM"
    layer: str = "DRAWING"
    position: Point = (0.0, 0.0)
    rotation: float = 0.0
    scale: Point = (1.0, 1.0)
    attached_to: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def transform(self) -> Transform:
        return Transform(self.position, self.rotation, self.scale)

@dataclass
class Shape(Item):
    type: str = "SHAPE"
    shape_type: str = "RECTANGLE"   # RECTANGLE | CIRCLE | TRIANGLE | HEXAGON
    width: float = 0.0
    height: float = 0.0
    style: Style = Style()

@dataclass
class Line(Item):
    type: str = "LINE"
    start_position: Point = (0.0, 0.0)
    end_position: Point = (0.0, 0.0)
    style: Style = Style()

@dataclass
class Curve(Item):
    type: str = "CURVE"
    points: list[Point] = field(default_factory=list)
    tension: float = 0.5
    closed: bool = False
    style: Style = Style()

@dataclass
class VectorPath(Item):
    type: str = "PATH"
    commands: list[PathCommand] = field(default_factory=list)
    style: Style = Style()

@dataclass
class Wall(Item):
    type: str = "WALL"
    layer: str = "FOG"
    points: list[Point] = field(default_factory=list)

Drawing = Shape | Line | Curve | VectorPath

ItemMutator = Callable[[Item], None]

def is_drawing(item: Item) -> bool:
    return isinstance(item, (Shape, Line, Curve, VectorPath))

def is_shape(item: Item) -> bool:
    return isinstance(item, Shape)

def is_wall(item: Item) -> bool:
    return isinstance(item, Wall)
