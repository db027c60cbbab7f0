"""Field constants and coordinate system for the tactical simulation.

The pitch is a flat rectangle with the origin in the top-left corner:
- X-axis: 0 to 1000 (left goal line to right goal line)
- Y-axis: 0 to 600 (top touchline to bottom touchline)

All distances are in field units and all velocities in field units per
simulation step.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple


class Vector2(NamedTuple):
    """2D vector with x, y components, used for position and velocity."""

    x: float
    y: float

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class FieldConstants:
    """Standard pitch dimensions shared by the simulator and the analyzers."""

    WIDTH: float = 1000.0
    HEIGHT: float = 600.0

    # An agent within this distance of the ball already controls it
    CAPTURE_RADIUS: float = 15.0

    # Field is split into a 3 x 3 grid of sectors for zone strategies
    SECTOR_COLUMNS: int = 3
    SECTOR_ROWS: int = 3


FIELD = FieldConstants()


@dataclass(frozen=True)
class FieldBounds:
    """Playable rectangle the simulator reflects and clamps against."""

    width: float = FieldConstants.WIDTH
    height: float = FieldConstants.HEIGHT

    def contains(self, point: Vector2) -> bool:
        """Check whether a point lies inside (or on) the boundary."""
        return 0.0 <= point.x <= self.width and 0.0 <= point.y <= self.height


DEFAULT_BOUNDS = FieldBounds()

TEAMS: tuple[str, ...] = ("red", "blue")

# Which goal line each team defends
TEAM_GOAL_SIDES: dict[str, str] = {"red": "left", "blue": "right"}

SECTOR_LABELS: tuple[str, ...] = (
    "Top-Left",
    "Top-Mid",
    "Top-Right",
    "Mid-Left",
    "Center",
    "Mid-Right",
    "Bot-Left",
    "Bot-Mid",
    "Bot-Right",
)


def opponent_of(team: str) -> str:
    """Return the opposing team name."""
    if team not in TEAMS:
        raise ValueError(f"Unknown team '{team}'. Must be one of: {', '.join(TEAMS)}")
    return TEAMS[1] if team == TEAMS[0] else TEAMS[0]


def sector_of(point: Vector2) -> str:
    """Classify a point into one of the nine field sectors."""
    col_width = FIELD.WIDTH / FIELD.SECTOR_COLUMNS
    row_height = FIELD.HEIGHT / FIELD.SECTOR_ROWS
    col = min(int(max(point.x, 0.0) // col_width), FIELD.SECTOR_COLUMNS - 1)
    row = min(int(max(point.y, 0.0) // row_height), FIELD.SECTOR_ROWS - 1)
    return SECTOR_LABELS[row * FIELD.SECTOR_COLUMNS + col]
