"""Friction models evaluated per integration step.

Coefficients are multiplicative fractions applied once per step, not per
second, so profiles with different time steps are not comparable by their
friction values alone.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..profiles.types import CustomFriction, FrictionModel, FrictionZone

PIECEWISE_COEFFICIENTS = 5


def _coefficient(coefficients: Sequence[float], index: int) -> float:
    """Optional coefficient, treated as 0 when absent."""
    return coefficients[index] if len(coefficients) > index else 0.0


def friction_coefficient(speed: float, friction: CustomFriction) -> float:
    """Evaluate a custom friction model at the given speed.

    Args:
        speed: Current scalar speed (units per step)
        friction: Custom friction definition

    Returns:
        Multiplicative friction coefficient for this step

    Raises:
        ValueError: If the model lacks the coefficients it needs
        OverflowError: If the exponential model overflows
    """
    c = friction.coefficients
    if not c:
        raise ValueError(f"{friction.model.value} friction has no coefficients")

    if friction.model is FrictionModel.LINEAR:
        return c[0] + _coefficient(c, 1) * speed

    if friction.model is FrictionModel.QUADRATIC:
        return c[0] + _coefficient(c, 1) * speed * speed

    if friction.model is FrictionModel.EXPONENTIAL:
        return c[0] * math.exp(-_coefficient(c, 1) * speed)

    if friction.model is FrictionModel.PIECEWISE:
        # [low, medium, high, threshold1, threshold2]
        if len(c) < PIECEWISE_COEFFICIENTS:
            raise ValueError(
                f"piecewise friction needs {PIECEWISE_COEFFICIENTS} coefficients, "
                f"got {len(c)}"
            )
        if speed < c[3]:
            return c[0]
        if speed < c[4]:
            return c[1]
        return c[2]

    return c[0]


def surface_multiplier(x: float, y: float, zones: Sequence[FrictionZone]) -> float:
    """Friction multiplier of the surface under (x, y); first matching zone wins."""
    for zone in zones:
        if zone.contains(x, y):
            return zone.multiplier
    return 1.0
