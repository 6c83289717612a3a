"""Vision-blocking walls derived from scene drawings, with door cutouts."""

from .constants import SAMPLE_DISTANCE, MITRE_LIMIT, WALL_KEY, DOOR_KEY
from .doors import DoorCutout, DoorReactor, door_cutout, is_door
from .contours import drawing_to_contours, commands_to_contours, stroked_commands, subtract_doors
from .actor import WallActor, WallDiff, WALL_KIND, diff_walls, build_wall, is_wall_source
from .sync import build_wall_reconciler, start_wall_sync
