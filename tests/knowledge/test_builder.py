"""Tests for the per-tick prediction builder."""

from __future__ import annotations

from pitchsense.field_constants import Vector2
from pitchsense.knowledge.builder import AgentState, WorldState, build_predictions
from pitchsense.profiles.types import DEFAULT_PROFILE
from pitchsense.simulation.motion import simulate_ball
from pitchsense.simulation.types import KinematicState

BALL = KinematicState(Vector2(500.0, 300.0), Vector2(4.0, 0.0))


def _world(tick: int = 1) -> WorldState:
    return WorldState(
        tick=tick,
        ball=BALL,
        agents=(
            AgentState("red_1", "red", Vector2(505.0, 300.0), Vector2(0.0, 0.0), 100.0),
            AgentState("red_2", "red", Vector2(100.0, 100.0), Vector2(1.0, 1.0), 100.0),
            AgentState("blue_1", "blue", Vector2(900.0, 500.0), Vector2(-2.0, 0.0), 1.0),
        ),
    )


def test_one_entry_per_agent():
    predictions = build_predictions(_world(tick=12))

    assert set(predictions) == {"red_1", "red_2", "blue_1"}
    assert all(p.tick == 12 for p in predictions.values())


def test_teammates_and_opponents_split_by_team():
    predictions = build_predictions(_world())

    red_1 = predictions["red_1"]
    assert red_1.me.agent_id == "red_1"
    assert [p.agent_id for p in red_1.teammates] == ["red_2"]
    assert [p.agent_id for p in red_1.opponents] == ["blue_1"]
    assert predictions["blue_1"].teammates == ()


def test_all_agents_share_one_ball_prediction():
    predictions = build_predictions(_world())

    balls = [p.ball for p in predictions.values()]
    assert all(ball is balls[0] for ball in balls)
    assert balls[0] == simulate_ball(BALL, DEFAULT_PROFILE)


def test_agent_prediction_is_shared_between_views():
    predictions = build_predictions(_world())

    assert predictions["red_1"].teammates[0] is predictions["red_2"].me
    assert predictions["blue_1"].opponents[0] is predictions["red_1"].me


def test_interception_counts():
    predictions = build_predictions(_world())

    red_2 = predictions["red_2"]
    assert red_2.teammates_can_intercept == 1  # red_1 is on the ball
    assert red_2.opponents_can_intercept == 0
    assert predictions["red_1"].me.interception.time_to_reach == 0.0


def test_faulty_profile_still_predicts(make_profile):
    profile = make_profile(custom_friction={"type": "piecewise", "coefficients": [0.5]})

    predictions = build_predictions(_world(), profile)

    assert predictions["red_1"].ball == simulate_ball(BALL, DEFAULT_PROFILE)


def test_agent_path_uses_target():
    world = WorldState(
        tick=1,
        ball=BALL,
        agents=(
            AgentState(
                "red_1",
                "red",
                Vector2(100.0, 100.0),
                Vector2(5.0, 0.0),
                50.0,
                target=Vector2(100.0, 200.0),
                target_bias=1.0,
            ),
        ),
    )

    trajectory = build_predictions(world)["red_1"].me.trajectory

    assert trajectory[0].x == 100.0
    assert trajectory[0].y == 105.0
