"""Physics profile data model.

A profile is the validated, swappable bundle of motion parameters the
simulator runs under. Profiles are imported from JSON documents using the
camelCase keys below and are immutable once built.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Upper bound on integration steps per prediction (maxPredictionTime / timeStep)
MAX_SIMULATION_STEPS = 10_000


class FrictionModel(Enum):
    """Speed-dependent friction model families."""

    LINEAR = "linear"  # c0 + c1 * v
    QUADRATIC = "quadratic"  # c0 + c1 * v^2
    EXPONENTIAL = "exponential"  # c0 * exp(-c1 * v)
    PIECEWISE = "piecewise"  # c0 / c1 / c2 split by thresholds c3, c4


@dataclass(frozen=True)
class SimulationParameters:
    friction: float
    time_step: float
    max_prediction_time: float
    bounce_energy_loss: float
    stop_threshold: float


@dataclass(frozen=True)
class CustomFriction:
    model: FrictionModel
    coefficients: tuple[float, ...]
    description: str = ""


@dataclass(frozen=True)
class FrictionZone:
    """Axis-aligned rectangle whose surface scales the friction coefficient."""

    x1: float
    y1: float
    x2: float
    y2: float
    multiplier: float

    def contains(self, x: float, y: float) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2


@dataclass(frozen=True)
class Environment:
    wind_enabled: bool = False
    wind_vx: float | None = None
    wind_vy: float | None = None
    friction_zones: tuple[FrictionZone, ...] = ()


@dataclass(frozen=True)
class ProfileMetadata:
    created_at: str
    tags: tuple[str, ...] = ()
    expected_accuracy: float | None = None
    benchmark_score: float | None = None


@dataclass(frozen=True)
class PhysicsProfile:
    """A complete, validated physics profile."""

    name: str
    version: str
    author: str
    description: str
    parameters: SimulationParameters
    metadata: ProfileMetadata
    custom_friction: CustomFriction | None = None
    environment: Environment | None = None

    @property
    def identity(self) -> str:
        """Display identity, e.g. ``Default Physics v1.0.0``."""
        return f"{self.name} v{self.version}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PhysicsProfile:
        """Build a profile from an import document.

        The document is expected to have passed validation already; this
        only maps keys onto the typed structure.
        """
        params = data["parameters"]
        parameters = SimulationParameters(
            friction=float(params["friction"]),
            time_step=float(params["timeStep"]),
            max_prediction_time=float(params["maxPredictionTime"]),
            bounce_energy_loss=float(params["bounceEnergyLoss"]),
            stop_threshold=float(params["stopThreshold"]),
        )

        custom_friction = None
        friction_data = data.get("customFriction")
        if friction_data:
            custom_friction = CustomFriction(
                model=FrictionModel(friction_data["type"]),
                coefficients=tuple(float(c) for c in friction_data["coefficients"]),
                description=friction_data.get("description", ""),
            )

        environment = None
        env_data = data.get("environment")
        if env_data:
            # "surfaceFrictionZones"/"frictionMultiplier" are the legacy key names
            zones_data = env_data.get("frictionZones")
            if zones_data is None:
                zones_data = env_data.get("surfaceFrictionZones", [])
            zones = tuple(
                FrictionZone(
                    x1=float(z["x1"]),
                    y1=float(z["y1"]),
                    x2=float(z["x2"]),
                    y2=float(z["y2"]),
                    multiplier=float(
                        z["multiplier"] if "multiplier" in z else z["frictionMultiplier"]
                    ),
                )
                for z in zones_data
            )
            environment = Environment(
                wind_enabled=bool(env_data.get("windEnabled", False)),
                wind_vx=env_data.get("windVx"),
                wind_vy=env_data.get("windVy"),
                friction_zones=zones,
            )

        meta = data.get("metadata") or {}
        metadata = ProfileMetadata(
            created_at=meta.get("createdAt") or meta.get("dateCreated") or "",
            tags=tuple(meta.get("tags", [])),
            expected_accuracy=meta.get("expectedAccuracy"),
            benchmark_score=meta.get("benchmarkScore"),
        )

        return cls(
            name=data["name"],
            version=data["version"],
            author=data["author"],
            description=data.get("description", ""),
            parameters=parameters,
            metadata=metadata,
            custom_friction=custom_friction,
            environment=environment,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the import document shape."""
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "author": self.author,
            "description": self.description,
            "parameters": {
                "friction": self.parameters.friction,
                "timeStep": self.parameters.time_step,
                "maxPredictionTime": self.parameters.max_prediction_time,
                "bounceEnergyLoss": self.parameters.bounce_energy_loss,
                "stopThreshold": self.parameters.stop_threshold,
            },
            "metadata": {
                "createdAt": self.metadata.created_at,
                "tags": list(self.metadata.tags),
            },
        }
        if self.metadata.expected_accuracy is not None:
            data["metadata"]["expectedAccuracy"] = self.metadata.expected_accuracy
        if self.metadata.benchmark_score is not None:
            data["metadata"]["benchmarkScore"] = self.metadata.benchmark_score

        if self.custom_friction is not None:
            data["customFriction"] = {
                "type": self.custom_friction.model.value,
                "coefficients": list(self.custom_friction.coefficients),
                "description": self.custom_friction.description,
            }

        if self.environment is not None:
            env: dict[str, Any] = {"windEnabled": self.environment.wind_enabled}
            if self.environment.wind_vx is not None:
                env["windVx"] = self.environment.wind_vx
            if self.environment.wind_vy is not None:
                env["windVy"] = self.environment.wind_vy
            env["frictionZones"] = [
                {
                    "x1": z.x1,
                    "y1": z.y1,
                    "x2": z.x2,
                    "y2": z.y2,
                    "multiplier": z.multiplier,
                }
                for z in self.environment.friction_zones
            ]
            data["environment"] = env

        return data


DEFAULT_PROFILE_NAME = "Default Physics"

DEFAULT_PROFILE = PhysicsProfile(
    name=DEFAULT_PROFILE_NAME,
    version="1.0.0",
    author="Game Engine",
    description="Baseline constant-friction model matching the live simulation",
    parameters=SimulationParameters(
        friction=0.94,
        time_step=0.1,
        max_prediction_time=3.0,
        bounce_energy_loss=0.8,
        stop_threshold=0.5,
    ),
    metadata=ProfileMetadata(created_at="2024-01-01T00:00:00+00:00", tags=("baseline",)),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


SAMPLE_PROFILE_DOCUMENT: dict[str, Any] = {
    "name": "Enhanced Friction Model",
    "version": "1.0.0",
    "author": "Sports Science Lab",
    "description": (
        "Quadratic friction model with a rough surface zone near the left goal"
    ),
    "parameters": {
        "friction": 0.92,
        "timeStep": 0.05,
        "maxPredictionTime": 4.0,
        "bounceEnergyLoss": 0.75,
        "stopThreshold": 0.3,
    },
    "customFriction": {
        "type": "quadratic",
        "coefficients": [0.92, -0.0005],
        "description": "Friction grows with speed (air resistance)",
    },
    "environment": {
        "windEnabled": False,
        "frictionZones": [
            {"x1": 0, "y1": 0, "x2": 200, "y2": 600, "multiplier": 0.97},
        ],
    },
    "metadata": {
        "createdAt": "2024-01-01T00:00:00+00:00",
        "tags": ["realistic", "quadratic-friction", "surface-zones"],
        "expectedAccuracy": 92,
    },
}


def sample_profile_document() -> dict[str, Any]:
    """Return a fresh copy of the sample document stamped with the current time."""
    document = copy.deepcopy(SAMPLE_PROFILE_DOCUMENT)
    document["metadata"]["createdAt"] = _now_iso()
    return document
