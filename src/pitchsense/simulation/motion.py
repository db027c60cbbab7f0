"""Fixed-step motion simulation for the ball and for agents.

The ball model is explicit integration with per-step multiplicative
friction, optional wind and surface zones, and lossy wall bounces. The agent
model decays velocity, optionally steers toward a target, and clamps to the
field instead of bouncing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import SimulationFault
from ..field_constants import DEFAULT_BOUNDS, FieldBounds, Vector2
from ..profiles.types import MAX_SIMULATION_STEPS, PhysicsProfile
from .friction import friction_coefficient, surface_multiplier
from .types import BallTrajectory, KinematicState, TrajectoryPoint


@dataclass(frozen=True)
class AgentMotionProfile:
    """Short-horizon motion parameters for agents."""

    horizon: float = 2.0  # Seconds
    time_step: float = 0.1
    decay: float = 0.98  # Velocity retained per step


DEFAULT_AGENT_MOTION = AgentMotionProfile()


def _step_count(max_time: float, time_step: float) -> int:
    # Round to absorb float error, e.g. 3.0 / 0.1 = 29.999999999999996
    steps = math.ceil(round(max_time / time_step, 9))
    return min(max(1, steps), MAX_SIMULATION_STEPS)


def simulate_ball(
    initial_state: KinematicState,
    profile: PhysicsProfile,
    bounds: FieldBounds = DEFAULT_BOUNDS,
) -> BallTrajectory:
    """Predict the ball's path under a validated profile.

    Each step resolves the friction coefficient at the current speed, scales
    it by the surface zone under the ball, applies it and any wind, then
    moves the ball by one velocity step. Crossing a wall reflects that axis
    and keeps ``bounce_energy_loss`` of its speed. The run ends when
    ``max_prediction_time`` is reached or the speed entering a step was
    already below ``stop_threshold``.

    Args:
        initial_state: Ball position and velocity
        profile: Physics profile (assumed validated)
        bounds: Field rectangle

    Returns:
        BallTrajectory with one point per integration step

    Raises:
        SimulationFault: If the friction model is unusable or the state
            becomes non-finite
    """
    params = profile.parameters
    environment = profile.environment
    zones = environment.friction_zones if environment else ()
    wind = None
    if (
        environment is not None
        and environment.wind_enabled
        and environment.wind_vx is not None
        and environment.wind_vy is not None
    ):
        wind = (environment.wind_vx, environment.wind_vy)

    x, y = initial_state.position
    vx, vy = initial_state.velocity
    dt = params.time_step
    will_exit_field = False
    path: list[TrajectoryPoint] = []

    for step in range(_step_count(params.max_prediction_time, dt)):
        speed = math.sqrt(vx * vx + vy * vy)

        # Resolve friction for this step
        if profile.custom_friction is not None:
            try:
                coeff = friction_coefficient(speed, profile.custom_friction)
            except (ValueError, IndexError, OverflowError) as e:
                raise SimulationFault(profile.name, str(e)) from e
        else:
            coeff = params.friction
        coeff *= surface_multiplier(x, y, zones)

        vx *= coeff
        vy *= coeff

        if wind is not None:
            vx += wind[0] * dt
            vy += wind[1] * dt

        x += vx
        y += vy

        # Wall bounces
        if x < 0 or x > bounds.width:
            vx = -vx * params.bounce_energy_loss
            x = min(max(x, 0.0), bounds.width)
            if x <= 0 or x >= bounds.width:
                will_exit_field = True
        if y < 0 or y > bounds.height:
            vy = -vy * params.bounce_energy_loss
            y = min(max(y, 0.0), bounds.height)
            if y <= 0 or y >= bounds.height:
                will_exit_field = True

        if not all(math.isfinite(v) for v in (x, y, vx, vy)):
            raise SimulationFault(
                profile.name, f"non-finite state at step {step + 1}"
            )

        path.append(
            TrajectoryPoint(x=x, y=y, t=(step + 1) * dt, velocity=Vector2(vx, vy))
        )

        if speed < params.stop_threshold:
            break

    last = path[-1] if path else None
    return BallTrajectory(
        current_position=Vector2(*initial_state.position),
        predicted_path=tuple(path),
        landing_position=last.position if last else None,
        time_to_stop=last.t if last else 0.0,
        will_exit_field=will_exit_field,
    )


def simulate_agent(
    initial_state: KinematicState,
    motion: AgentMotionProfile = DEFAULT_AGENT_MOTION,
    bounds: FieldBounds = DEFAULT_BOUNDS,
    target: Vector2 | None = None,
    target_bias: float = 0.0,
) -> tuple[TrajectoryPoint, ...]:
    """Predict an agent's short-horizon path.

    Velocity decays by ``motion.decay`` per step. With a target, the velocity
    direction is blended toward it by ``target_bias`` (0 keeps the current
    heading, 1 heads straight at the target) while keeping the current speed.
    Positions are clamped to the field.

    Args:
        initial_state: Agent position and velocity
        motion: Agent motion parameters
        bounds: Field rectangle
        target: Optional point the agent is heading for
        target_bias: Steering weight in [0, 1]

    Returns:
        Tuple of trajectory points, one per step
    """
    bias = min(max(target_bias, 0.0), 1.0)
    x, y = initial_state.position
    vx, vy = initial_state.velocity
    dt = motion.time_step
    path: list[TrajectoryPoint] = []

    for step in range(_step_count(motion.horizon, dt)):
        if target is not None and bias > 0.0:
            dx = target.x - x
            dy = target.y - y
            distance = math.sqrt(dx * dx + dy * dy)
            speed = math.sqrt(vx * vx + vy * vy)
            if distance > 1e-9:
                # Never overshoot the target within one step
                reach = min(speed, distance)
                vx = vx * (1.0 - bias) + (dx / distance) * reach * bias
                vy = vy * (1.0 - bias) + (dy / distance) * reach * bias

        x = min(max(x + vx, 0.0), bounds.width)
        y = min(max(y + vy, 0.0), bounds.height)

        path.append(
            TrajectoryPoint(x=x, y=y, t=(step + 1) * dt, velocity=Vector2(vx, vy))
        )

        vx *= motion.decay
        vy *= motion.decay

    return tuple(path)
