"""Tests for friction models and surface zones."""

from __future__ import annotations

import math

import pytest

from pitchsense.profiles.types import CustomFriction, FrictionModel, FrictionZone
from pitchsense.simulation.friction import friction_coefficient, surface_multiplier


def _friction(model: FrictionModel, *coefficients: float) -> CustomFriction:
    return CustomFriction(model=model, coefficients=tuple(coefficients))


class TestFrictionModels:
    def test_linear(self):
        assert friction_coefficient(10.0, _friction(FrictionModel.LINEAR, 0.9, -0.01)) == pytest.approx(0.8)

    def test_quadratic(self):
        assert friction_coefficient(10.0, _friction(FrictionModel.QUADRATIC, 0.92, -0.0005)) == pytest.approx(0.87)

    def test_exponential(self):
        result = friction_coefficient(2.0, _friction(FrictionModel.EXPONENTIAL, 0.95, 0.1))
        assert result == pytest.approx(0.95 * math.exp(-0.2))

    def test_missing_second_coefficient_is_zero(self):
        for model in (FrictionModel.LINEAR, FrictionModel.QUADRATIC, FrictionModel.EXPONENTIAL):
            assert friction_coefficient(7.0, _friction(model, 0.9)) == pytest.approx(0.9)

    @pytest.mark.parametrize(
        "speed, expected",
        [(1.0, 0.99), (5.0, 0.95), (9.99, 0.95), (10.0, 0.9), (50.0, 0.9)],
    )
    def test_piecewise_thresholds(self, speed, expected):
        friction = _friction(FrictionModel.PIECEWISE, 0.99, 0.95, 0.9, 5.0, 10.0)
        assert friction_coefficient(speed, friction) == expected

    def test_piecewise_needs_five_coefficients(self):
        with pytest.raises(ValueError, match="piecewise"):
            friction_coefficient(3.0, _friction(FrictionModel.PIECEWISE, 0.9, 0.95))

    def test_empty_coefficients_rejected(self):
        with pytest.raises(ValueError):
            friction_coefficient(3.0, _friction(FrictionModel.LINEAR))


class TestSurfaceMultiplier:
    def test_outside_every_zone(self):
        zones = (FrictionZone(0, 0, 100, 100, 0.5),)
        assert surface_multiplier(500, 500, zones) == 1.0

    def test_no_zones(self):
        assert surface_multiplier(10, 10, ()) == 1.0

    def test_first_matching_zone_wins(self):
        zones = (
            FrictionZone(0, 0, 200, 600, 0.97),
            FrictionZone(0, 0, 1000, 600, 0.5),
        )
        assert surface_multiplier(100, 300, zones) == 0.97
        assert surface_multiplier(300, 300, zones) == 0.5

    def test_zone_edges_are_inclusive(self):
        zones = (FrictionZone(0, 0, 200, 600, 0.8),)
        assert surface_multiplier(200, 600, zones) == 0.8
