"""Ball interception analysis.

Provides analysis of:
- Whether (and when) an agent can reach the ball along its predicted path
- The best rendezvous point, trading off how soon and how close it is
- Pass quality, from the receiver's and the opponents' interception chances
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..field_constants import FIELD, Vector2
from ..profiles.types import DEFAULT_PROFILE
from ..simulation.motion import simulate_ball
from ..simulation.types import BallTrajectory, KinematicState

# Assumed max speeds when evaluating passes
TEAMMATE_PASS_SPEED = 5.0
OPPONENT_PASS_SPEED = 4.5

HIGH_INTERCEPTION_RISK = 0.7
MODERATE_INTERCEPTION_RISK = 0.4


@dataclass(frozen=True)
class InterceptionAnalysis:
    """Feasibility, timing and confidence of reaching the ball."""

    is_possible: bool
    intercept_point: Vector2 | None
    time_to_reach: float | None
    required_speed: float | None
    confidence: float  # 0-1


@dataclass(frozen=True)
class PassEvaluation:
    quality: float  # 0-1
    will_reach_teammate: bool
    interception_risk: float  # 0-1
    reason: str


NO_INTERCEPTION = InterceptionAnalysis(
    is_possible=False,
    intercept_point=None,
    time_to_reach=None,
    required_speed=None,
    confidence=0.0,
)


def analyze_interception(
    agent_position: Vector2,
    agent_max_speed: float,
    ball_trajectory: BallTrajectory,
    capture_radius: float = FIELD.CAPTURE_RADIUS,
) -> InterceptionAnalysis:
    """Decide whether an agent can intercept the ball.

    An agent already within ``capture_radius`` of the ball has it now.
    Otherwise the earliest trajectory point the agent can reach at an
    average speed within its maximum wins. Reaching at exactly the maximum
    speed counts as feasible.

    Args:
        agent_position: Where the agent is now
        agent_max_speed: Agent's top speed (units per second of trajectory time)
        ball_trajectory: Predicted ball path
        capture_radius: Distance at which the agent controls the ball

    Returns:
        InterceptionAnalysis (``NO_INTERCEPTION`` when infeasible)
    """
    current_distance = agent_position.distance_to(ball_trajectory.current_position)
    if current_distance <= capture_radius:
        return InterceptionAnalysis(
            is_possible=True,
            intercept_point=ball_trajectory.current_position,
            time_to_reach=0.0,
            required_speed=0.0,
            confidence=1.0,
        )

    if agent_max_speed <= 0:
        return NO_INTERCEPTION

    for point in ball_trajectory.predicted_path:
        # A zero-time sample would need infinite speed
        if point.t <= 0:
            continue

        distance = math.hypot(point.x - agent_position.x, point.y - agent_position.y)
        required_speed = distance / point.t

        if required_speed <= agent_max_speed and distance > capture_radius:
            return InterceptionAnalysis(
                is_possible=True,
                intercept_point=point.position,
                time_to_reach=point.t,
                required_speed=required_speed,
                confidence=max(0.0, 1.0 - required_speed / agent_max_speed),
            )

    return NO_INTERCEPTION


def find_optimal_intercept_point(
    agent_position: Vector2,
    agent_max_speed: float,
    ball_trajectory: BallTrajectory,
) -> Vector2 | None:
    """Find the best reachable rendezvous point.

    Every reachable point is scored by ``(1 / t) * (1 / (distance + 1))`` so
    sooner and closer points are preferred; ties keep the earliest point.

    Returns:
        Position with the highest score, or None if nothing is reachable
    """
    best_point: Vector2 | None = None
    best_score = -math.inf

    for point in ball_trajectory.predicted_path:
        if point.t <= 0:
            continue

        distance = math.hypot(point.x - agent_position.x, point.y - agent_position.y)
        if distance / point.t > agent_max_speed:
            continue

        score = (1.0 / point.t) * (1.0 / (distance + 1.0))
        if score > best_score:
            best_score = score
            best_point = point.position

    return best_point


def evaluate_pass_quality(
    origin: Vector2,
    target: Vector2,
    pass_power: float,
    teammate: Vector2,
    opponents: Sequence[Vector2],
) -> PassEvaluation:
    """Rate a pass from ``origin`` toward ``target``.

    The pass is simulated under the default profile; quality depends on
    whether the teammate can reach it and on the strongest opponent's
    interception confidence.
    """
    dx = target.x - origin.x
    dy = target.y - origin.y
    distance = math.hypot(dx, dy)
    if distance < 1e-9:
        return PassEvaluation(
            quality=0.0,
            will_reach_teammate=False,
            interception_risk=0.0,
            reason="Pass target equals origin",
        )

    velocity = Vector2(dx / distance * pass_power, dy / distance * pass_power)
    pass_trajectory = simulate_ball(KinematicState(origin, velocity), DEFAULT_PROFILE)

    teammate_intercept = analyze_interception(
        teammate, TEAMMATE_PASS_SPEED, pass_trajectory
    )

    risk = 0.0
    for opponent in opponents:
        opponent_intercept = analyze_interception(
            opponent, OPPONENT_PASS_SPEED, pass_trajectory
        )
        if opponent_intercept.is_possible:
            risk = max(risk, opponent_intercept.confidence)

    if not teammate_intercept.is_possible:
        quality, reason = 0.0, "Teammate cannot reach pass"
    elif risk > HIGH_INTERCEPTION_RISK:
        quality, reason = 0.3, "High interception risk"
    elif risk > MODERATE_INTERCEPTION_RISK:
        quality, reason = 0.6, "Moderate interception risk"
    else:
        quality, reason = 0.9, "Safe pass"

    return PassEvaluation(
        quality=quality,
        will_reach_teammate=teammate_intercept.is_possible,
        interception_risk=risk,
        reason=reason,
    )
