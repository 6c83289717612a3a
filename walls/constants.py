"""Wall generation constants.

Distances are in scene units (the same units as drawing coordinates).
"""

SAMPLE_DISTANCE = 10.0   # max step between points when flattening curved outline spans
MITRE_LIMIT = 4.0        # mitre joins longer than this many half-widths are bevelled

# Item metadata flags
WALL_KEY = "vision-walls/enabled"   # drawing generates walls
DOOR_KEY = "vision-walls/door"      # drawing cuts openings in walls
