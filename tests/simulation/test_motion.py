"""Tests for ball and agent motion simulation."""

from __future__ import annotations

import pytest

from pitchsense.errors import SimulationFault
from pitchsense.field_constants import DEFAULT_BOUNDS, FieldBounds, Vector2
from pitchsense.profiles.types import (
    DEFAULT_PROFILE,
    MAX_SIMULATION_STEPS,
    PhysicsProfile,
    sample_profile_document,
)
from pitchsense.simulation.motion import AgentMotionProfile, simulate_agent, simulate_ball
from pitchsense.simulation.types import KinematicState


def _state(x, y, vx, vy) -> KinematicState:
    return KinematicState(Vector2(x, y), Vector2(vx, vy))


class TestHandComputedScenarios:
    def test_halving_friction_stops_after_six_points(self, make_profile):
        profile = make_profile(
            friction=0.5, timeStep=1.0, maxPredictionTime=10.0, stopThreshold=0.4
        )

        trajectory = simulate_ball(_state(100, 300, 10, 0), profile)

        assert len(trajectory.predicted_path) == 6
        speeds = [p.speed for p in trajectory.predicted_path]
        assert speeds == pytest.approx([5.0, 2.5, 1.25, 0.625, 0.3125, 0.15625])
        assert [p.t for p in trajectory.predicted_path] == pytest.approx(
            [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        )
        assert [p.x for p in trajectory.predicted_path] == pytest.approx(
            [105.0, 107.5, 108.75, 109.375, 109.6875, 109.84375]
        )
        assert trajectory.will_exit_field is False

    def test_right_wall_bounce_keeps_bounce_fraction(self, make_profile):
        profile = make_profile(friction=1.0, bounceEnergyLoss=0.8)

        trajectory = simulate_ball(_state(998, 300, 8, 0), profile)

        first = trajectory.predicted_path[0]
        assert first.velocity.x == pytest.approx(-6.4)
        assert first.x == DEFAULT_BOUNDS.width
        assert first.y == 300
        assert trajectory.will_exit_field is True


class TestTrajectoryProperties:
    def test_simulation_is_deterministic(self):
        profile = PhysicsProfile.from_dict(sample_profile_document())
        state = _state(150, 120, 12.5, -7.25)

        first = simulate_ball(state, profile)
        second = simulate_ball(state, profile)

        assert first == second

    def test_default_friction_speeds_never_increase_without_bounce(self):
        trajectory = simulate_ball(_state(500, 300, 3, 2), DEFAULT_PROFILE)

        speeds = [p.speed for p in trajectory.predicted_path]
        assert len(speeds) > 1
        assert all(b <= a for a, b in zip(speeds, speeds[1:]))

    @pytest.mark.parametrize(
        "state",
        [
            _state(5, 5, -20, -20),
            _state(995, 595, 25, 25),
            _state(500, 300, 40, -3),
            _state(10, 590, -15, 30),
        ],
    )
    def test_points_stay_inside_field(self, state):
        for profile in (DEFAULT_PROFILE, PhysicsProfile.from_dict(sample_profile_document())):
            trajectory = simulate_ball(state, profile)
            for point in trajectory.predicted_path:
                assert DEFAULT_BOUNDS.contains(point.position)

    def test_landing_matches_last_point(self):
        trajectory = simulate_ball(_state(200, 200, 4, 3), DEFAULT_PROFILE)

        last = trajectory.predicted_path[-1]
        assert trajectory.time_to_stop == last.t
        assert trajectory.landing_position == Vector2(last.x, last.y)
        assert trajectory.current_position == Vector2(200, 200)

    def test_stops_at_max_prediction_time(self):
        trajectory = simulate_ball(_state(100, 300, 20, 0), DEFAULT_PROFILE)

        assert len(trajectory.predicted_path) == 30
        assert trajectory.time_to_stop == pytest.approx(3.0)

    def test_resting_ball_records_single_point(self):
        trajectory = simulate_ball(_state(400, 250, 0, 0), DEFAULT_PROFILE)

        assert len(trajectory.predicted_path) == 1
        assert trajectory.landing_position == Vector2(400, 250)

    def test_custom_bounds(self):
        bounds = FieldBounds(width=200, height=100)

        trajectory = simulate_ball(_state(190, 50, 30, 0), DEFAULT_PROFILE, bounds)

        assert trajectory.will_exit_field is True
        assert all(bounds.contains(p.position) for p in trajectory.predicted_path)

    def test_step_count_is_capped(self, make_profile):
        profile = make_profile(maxPredictionTime=1e6, timeStep=1e-6, stopThreshold=0.0)

        trajectory = simulate_ball(_state(500, 300, 0, 0), profile)

        assert len(trajectory.predicted_path) == MAX_SIMULATION_STEPS

    def test_top_wall_bounce_reflects_y(self, make_profile):
        profile = make_profile(friction=1.0, bounceEnergyLoss=0.5)

        trajectory = simulate_ball(_state(500, 3, 0, -10), profile)

        first = trajectory.predicted_path[0]
        assert first.y == 0.0
        assert first.velocity.y == pytest.approx(5.0)


class TestEnvironmentEffects:
    def test_wind_accelerates_by_time_step(self, make_profile):
        profile = make_profile(
            friction=1.0,
            stopThreshold=0.0,
            environment={"windEnabled": True, "windVx": 1.0, "windVy": -2.0},
        )

        trajectory = simulate_ball(_state(100, 300, 0, 0), profile)

        first = trajectory.predicted_path[0]
        assert first.velocity.x == pytest.approx(0.1)
        assert first.velocity.y == pytest.approx(-0.2)
        assert first.x == pytest.approx(100.1)

    def test_wind_needs_both_components(self, make_profile):
        profile = make_profile(
            friction=1.0, environment={"windEnabled": True, "windVx": 1.0}
        )

        trajectory = simulate_ball(_state(100, 300, 5, 0), profile)

        assert trajectory.predicted_path[0].velocity == Vector2(5.0, 0.0)

    def test_disabled_wind_is_ignored(self, make_profile):
        profile = make_profile(
            friction=1.0,
            environment={"windEnabled": False, "windVx": 3.0, "windVy": 3.0},
        )

        trajectory = simulate_ball(_state(100, 300, 5, 0), profile)

        assert trajectory.predicted_path[0].velocity == Vector2(5.0, 0.0)

    def test_friction_zone_scales_coefficient(self, make_profile):
        profile = make_profile(
            friction=1.0,
            environment={
                "windEnabled": False,
                "frictionZones": [
                    {"x1": 0, "y1": 0, "x2": 200, "y2": 600, "multiplier": 0.5}
                ],
            },
        )

        inside = simulate_ball(_state(100, 300, 10, 0), profile)
        outside = simulate_ball(_state(300, 300, 10, 0), profile)

        assert inside.predicted_path[0].velocity.x == pytest.approx(5.0)
        assert outside.predicted_path[0].velocity.x == pytest.approx(10.0)

    def test_custom_friction_replaces_base_friction(self, make_profile):
        profile = make_profile(
            friction=0.5,
            custom_friction={"type": "linear", "coefficients": [0.9]},
        )

        trajectory = simulate_ball(_state(100, 300, 10, 0), profile)

        assert trajectory.predicted_path[0].velocity.x == pytest.approx(9.0)


class TestSimulationFaults:
    def test_short_piecewise_model_raises_fault(self, make_profile):
        profile = make_profile(
            custom_friction={"type": "piecewise", "coefficients": [0.9, 0.95]}
        )

        with pytest.raises(SimulationFault) as exc_info:
            simulate_ball(_state(100, 300, 10, 0), profile)

        assert exc_info.value.profile_name == "Test Physics"
        assert "piecewise" in exc_info.value.reason

    def test_overflowing_model_raises_fault(self, make_profile):
        profile = make_profile(
            custom_friction={"type": "exponential", "coefficients": [0.9, -1000.0]}
        )

        with pytest.raises(SimulationFault):
            simulate_ball(_state(100, 300, 10, 0), profile)

    def test_runaway_velocity_raises_fault(self, make_profile):
        profile = make_profile(
            stopThreshold=0.0,
            maxPredictionTime=100.0,
            custom_friction={"type": "linear", "coefficients": [1e200]},
        )

        with pytest.raises(SimulationFault, match="non-finite"):
            simulate_ball(_state(500, 300, 1e200, 0), profile)


class TestAgentMotion:
    def test_horizon_and_decay(self):
        trajectory = simulate_agent(_state(100, 100, 5, 0))

        assert len(trajectory) == 20
        assert trajectory[0].x == pytest.approx(105.0)
        assert trajectory[1].velocity.x == pytest.approx(4.9)
        assert trajectory[-1].t == pytest.approx(2.0)

    def test_clamps_to_field_instead_of_bouncing(self):
        trajectory = simulate_agent(_state(995, 300, 10, 0))

        assert all(p.x <= DEFAULT_BOUNDS.width for p in trajectory)
        assert trajectory[0].x == DEFAULT_BOUNDS.width
        assert trajectory[0].velocity.x > 0

    def test_target_bias_steers_toward_target(self):
        trajectory = simulate_agent(
            _state(100, 100, 5, 0), target=Vector2(100, 110), target_bias=1.0
        )

        assert trajectory[0].x == pytest.approx(100.0)
        assert trajectory[0].y == pytest.approx(105.0)
        assert trajectory[1].y == pytest.approx(109.9)

    def test_zero_bias_ignores_target(self):
        plain = simulate_agent(_state(100, 100, 5, 0))
        biased = simulate_agent(
            _state(100, 100, 5, 0), target=Vector2(100, 500), target_bias=0.0
        )

        assert plain == biased

    def test_custom_motion_profile(self):
        motion = AgentMotionProfile(horizon=1.0, time_step=0.25, decay=0.5)

        trajectory = simulate_agent(_state(100, 100, 8, 0), motion)

        assert len(trajectory) == 4
        assert [p.x for p in trajectory] == pytest.approx([108, 112, 114, 115])
