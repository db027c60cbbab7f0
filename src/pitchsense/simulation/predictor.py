"""Fault-tolerant ball prediction.

Custom profiles are user supplied and may fail at integration time. The
wrapper here degrades to the default profile for that call so a faulty
profile can never halt the host simulation loop.
"""

from __future__ import annotations

import logging

from ..errors import SimulationFault
from ..field_constants import DEFAULT_BOUNDS, FieldBounds
from ..profiles.types import DEFAULT_PROFILE, PhysicsProfile
from .motion import simulate_ball
from .types import BallTrajectory, KinematicState

logger = logging.getLogger(__name__)


def predict_ball(
    initial_state: KinematicState,
    profile: PhysicsProfile | None = None,
    bounds: FieldBounds = DEFAULT_BOUNDS,
) -> BallTrajectory:
    """Predict the ball trajectory, falling back to the default profile.

    Args:
        initial_state: Ball position and velocity
        profile: Active profile, or None for the default
        bounds: Field rectangle

    Returns:
        BallTrajectory from ``profile`` or, if it faulted, from the default
    """
    if profile is None or profile is DEFAULT_PROFILE:
        return simulate_ball(initial_state, DEFAULT_PROFILE, bounds)

    try:
        return simulate_ball(initial_state, profile, bounds)
    except SimulationFault as e:
        logger.warning(f"{e}; falling back to {DEFAULT_PROFILE.name}")
    except Exception:
        logger.exception(
            f"Profile '{profile.name}' raised during simulation; "
            f"falling back to {DEFAULT_PROFILE.name}"
        )

    return simulate_ball(initial_state, DEFAULT_PROFILE, bounds)
