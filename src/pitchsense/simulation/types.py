"""Kinematic state and trajectory types produced by the motion simulator."""

from __future__ import annotations

from dataclasses import dataclass

from ..field_constants import Vector2


@dataclass(frozen=True)
class KinematicState:
    """Position and per-step velocity of a ball or an agent."""

    position: Vector2
    velocity: Vector2


@dataclass(frozen=True)
class TrajectoryPoint:
    """One sampled state along a simulated path."""

    x: float
    y: float
    t: float  # Seconds since the prediction started
    velocity: Vector2

    @property
    def position(self) -> Vector2:
        return Vector2(self.x, self.y)

    @property
    def speed(self) -> float:
        return self.velocity.magnitude()


@dataclass(frozen=True)
class BallTrajectory:
    """Predicted ball path from the current position until it stops.

    ``time_to_stop`` equals the ``t`` of the last recorded point and
    ``landing_position`` equals its position.
    """

    current_position: Vector2
    predicted_path: tuple[TrajectoryPoint, ...]
    landing_position: Vector2 | None
    time_to_stop: float
    will_exit_field: bool
