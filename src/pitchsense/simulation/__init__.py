"""Ball and agent motion simulation."""

from .motion import DEFAULT_AGENT_MOTION, AgentMotionProfile, simulate_agent, simulate_ball
from .predictor import predict_ball
from .types import BallTrajectory, KinematicState, TrajectoryPoint

__all__ = [
    "AgentMotionProfile",
    "BallTrajectory",
    "DEFAULT_AGENT_MOTION",
    "KinematicState",
    "TrajectoryPoint",
    "predict_ball",
    "simulate_agent",
    "simulate_ball",
]
