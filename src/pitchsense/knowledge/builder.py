"""Per-tick prediction lane.

Runs synchronously inside the host's frame: one ball prediction, one
agent path and interception per agent, then one ``Predictions`` value per
agent assembled from those shared results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..analysis.interception import analyze_interception
from ..field_constants import DEFAULT_BOUNDS, FIELD, FieldBounds, Vector2
from ..profiles.types import PhysicsProfile
from ..simulation.motion import DEFAULT_AGENT_MOTION, AgentMotionProfile, simulate_agent
from ..simulation.predictor import predict_ball
from ..simulation.types import BallTrajectory, KinematicState
from .snapshot import AgentPrediction, Predictions


@dataclass(frozen=True)
class AgentState:
    """Kinematic state of one agent as reported by the host on a tick."""

    agent_id: str
    team: str
    position: Vector2
    velocity: Vector2
    max_speed: float
    target: Vector2 | None = None
    target_bias: float = 0.0


@dataclass(frozen=True)
class WorldState:
    tick: int
    ball: KinematicState
    agents: tuple[AgentState, ...]


def predict_agent(
    agent: AgentState,
    ball: BallTrajectory,
    motion: AgentMotionProfile = DEFAULT_AGENT_MOTION,
    bounds: FieldBounds = DEFAULT_BOUNDS,
    capture_radius: float = FIELD.CAPTURE_RADIUS,
) -> AgentPrediction:
    trajectory = simulate_agent(
        KinematicState(agent.position, agent.velocity),
        motion,
        bounds,
        target=agent.target,
        target_bias=agent.target_bias,
    )
    interception = analyze_interception(
        agent.position, agent.max_speed, ball, capture_radius
    )
    return AgentPrediction(
        agent_id=agent.agent_id,
        team=agent.team,
        trajectory=trajectory,
        interception=interception,
    )


def build_predictions(
    world: WorldState,
    profile: PhysicsProfile | None = None,
    bounds: FieldBounds = DEFAULT_BOUNDS,
    motion: AgentMotionProfile = DEFAULT_AGENT_MOTION,
    capture_radius: float = FIELD.CAPTURE_RADIUS,
) -> dict[str, Predictions]:
    """Compute every agent's predictions for one tick.

    The ball is predicted once under ``profile`` (falling back to the
    default profile if it faults) and each agent's path and interception
    is computed once, so every snapshot built from the result refers to
    the same tick's values.

    Args:
        world: Ball and agent states for this tick
        profile: Active physics profile, or None for the default
        bounds: Field rectangle
        motion: Agent motion parameters
        capture_radius: Ball control distance

    Returns:
        Mapping of agent id to that agent's Predictions
    """
    ball = predict_ball(world.ball, profile, bounds)

    per_agent = {
        agent.agent_id: predict_agent(agent, ball, motion, bounds, capture_radius)
        for agent in world.agents
    }

    predictions = {}
    for agent in world.agents:
        teammates = _others(world.agents, agent, same_team=True)
        opponents = _others(world.agents, agent, same_team=False)
        predictions[agent.agent_id] = Predictions(
            tick=world.tick,
            ball=ball,
            me=per_agent[agent.agent_id],
            teammates=tuple(per_agent[other.agent_id] for other in teammates),
            opponents=tuple(per_agent[other.agent_id] for other in opponents),
        )
    return predictions


def _others(
    agents: Sequence[AgentState], agent: AgentState, same_team: bool
) -> list[AgentState]:
    return [
        other
        for other in agents
        if other.agent_id != agent.agent_id and (other.team == agent.team) == same_team
    ]
