"""Shared fixtures for pitchsense tests."""

from __future__ import annotations

import copy

import pytest

from pitchsense.profiles.types import PhysicsProfile

BASE_DOCUMENT = {
    "name": "Test Physics",
    "version": "1.0.0",
    "author": "Tests",
    "description": "Profile used by the test suite",
    "parameters": {
        "friction": 0.94,
        "timeStep": 0.1,
        "maxPredictionTime": 3.0,
        "bounceEnergyLoss": 0.8,
        "stopThreshold": 0.5,
    },
    "metadata": {"createdAt": "2024-01-01T00:00:00+00:00", "tags": ["test"]},
}


@pytest.fixture
def profile_document():
    """Factory for valid profile documents with overridable parameters."""

    def _make(**parameters):
        document = copy.deepcopy(BASE_DOCUMENT)
        document["parameters"].update(parameters)
        return document

    return _make


@pytest.fixture
def make_profile(profile_document):
    """Factory for PhysicsProfile objects.

    Keyword arguments override parameters; ``custom_friction`` and
    ``environment`` take the document form of those sections.
    """

    def _make(custom_friction=None, environment=None, name="Test Physics", **parameters):
        document = profile_document(**parameters)
        document["name"] = name
        if custom_friction is not None:
            document["customFriction"] = custom_friction
        if environment is not None:
            document["environment"] = environment
        return PhysicsProfile.from_dict(document)

    return _make
