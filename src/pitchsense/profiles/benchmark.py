"""Profile benchmark harness.

Runs a profile against reference cases and reports landing accuracy and
compute cost, so a candidate can be compared with the default before it is
activated.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Sequence

from ..field_constants import DEFAULT_BOUNDS, FieldBounds, Vector2
from ..simulation.motion import simulate_ball
from ..simulation.types import KinematicState
from .types import DEFAULT_PROFILE, PhysicsProfile


@dataclass(frozen=True)
class BenchmarkCase:
    initial_state: KinematicState
    expected_landing: Vector2


@dataclass(frozen=True)
class BenchmarkReport:
    """Aggregate accuracy/performance of one profile over a case set."""

    profile_name: str
    average_error: float
    max_error: float
    average_compute_time: float  # Milliseconds
    total_tests: int

    def to_dict(self) -> dict:
        return {
            "profile_name": self.profile_name,
            "average_error": self.average_error,
            "max_error": self.max_error,
            "average_compute_time": self.average_compute_time,
            "total_tests": self.total_tests,
        }


# (x, y, vx, vy) starting states covering the common ball situations
REFERENCE_STATES: tuple[tuple[float, float, float, float], ...] = (
    # Slow rolling balls
    (100.0, 300.0, 2.0, 1.0),
    (500.0, 300.0, -1.0, 2.0),
    # Fast shots
    (200.0, 100.0, 15.0, 5.0),
    (800.0, 500.0, -10.0, -8.0),
    # Diagonal movements
    (300.0, 200.0, 5.0, 5.0),
    (700.0, 400.0, -5.0, -5.0),
    # Corner cases
    (50.0, 50.0, 3.0, 3.0),
    (950.0, 550.0, -3.0, -3.0),
    # High velocity bounces
    (500.0, 300.0, 20.0, 0.0),
    (500.0, 300.0, 0.0, 15.0),
)


def reference_cases(bounds: FieldBounds = DEFAULT_BOUNDS) -> list[BenchmarkCase]:
    """Reference cases whose expected landings are the default profile's own."""
    cases = []
    for x, y, vx, vy in REFERENCE_STATES:
        state = KinematicState(Vector2(x, y), Vector2(vx, vy))
        trajectory = simulate_ball(state, DEFAULT_PROFILE, bounds)
        cases.append(
            BenchmarkCase(
                initial_state=state,
                expected_landing=trajectory.landing_position or state.position,
            )
        )
    return cases


def benchmark(
    profile: PhysicsProfile,
    cases: Sequence[BenchmarkCase],
    bounds: FieldBounds = DEFAULT_BOUNDS,
) -> BenchmarkReport:
    """Benchmark a profile against test cases.

    Args:
        profile: Profile under test
        cases: Starting states with expected landing positions
        bounds: Field rectangle

    Returns:
        BenchmarkReport with mean/max landing error and mean compute time

    Raises:
        SimulationFault: If the profile cannot be simulated
    """
    total_error = 0.0
    max_error = 0.0
    total_time = 0.0

    for case in cases:
        start = time.perf_counter()
        trajectory = simulate_ball(case.initial_state, profile, bounds)
        total_time += (time.perf_counter() - start) * 1000.0

        landing = trajectory.landing_position or case.initial_state.position
        error = math.hypot(
            landing.x - case.expected_landing.x,
            landing.y - case.expected_landing.y,
        )
        total_error += error
        max_error = max(max_error, error)

    count = len(cases)
    return BenchmarkReport(
        profile_name=profile.name,
        average_error=total_error / count if count else 0.0,
        max_error=max_error,
        average_compute_time=total_time / count if count else 0.0,
        total_tests=count,
    )


def compare_profiles(
    candidate: PhysicsProfile | None,
    cases: Sequence[BenchmarkCase] | None = None,
    bounds: FieldBounds = DEFAULT_BOUNDS,
) -> list[BenchmarkReport]:
    """Benchmark the default profile and, if given, a candidate on the same cases."""
    if cases is None:
        cases = reference_cases(bounds)

    reports = [benchmark(DEFAULT_PROFILE, cases, bounds)]
    if candidate is not None:
        reports.append(benchmark(candidate, cases, bounds))
    return reports
