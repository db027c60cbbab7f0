"""JSON Schema validation for imported physics profiles.

Every failing rule produces exactly one human-readable message. Messages are
reported in a fixed rule order and validation never stops at the first
failure, so an importer sees the whole list at once.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from typing import Any

import jsonschema
from jsonschema import Draft7Validator

from .types import MAX_SIMULATION_STEPS

PARAMETER_KEYS = (
    "friction",
    "timeStep",
    "maxPredictionTime",
    "bounceEnergyLoss",
    "stopThreshold",
)

# Messages keyed by dotted rule path, in reporting order
RULE_MESSAGES: dict[str, str] = {
    "": "Profile must be a JSON object",
    "name": 'Missing or invalid "name" field',
    "version": 'Missing or invalid "version" field',
    "author": 'Missing or invalid "author" field',
    "description": 'Invalid "description" field (must be text)',
    "parameters": 'Missing "parameters" object',
    "parameters.friction": "Invalid friction (must be 0-1)",
    "parameters.timeStep": "Invalid timeStep (must be > 0 and <= 1)",
    "parameters.maxPredictionTime": "Invalid maxPredictionTime (must be > 0)",
    "parameters.bounceEnergyLoss": "Invalid bounceEnergyLoss (must be 0-1)",
    "parameters.stopThreshold": "Invalid stopThreshold (must be >= 0)",
    "parameters.stepCount": (
        f"Too many simulation steps (maxPredictionTime / timeStep must be "
        f"<= {MAX_SIMULATION_STEPS})"
    ),
    "customFriction": 'Invalid "customFriction" object',
    "customFriction.type": (
        "Invalid customFriction type (must be linear, quadratic, exponential "
        "or piecewise)"
    ),
    "customFriction.coefficients": (
        "Invalid customFriction coefficients (must be a non-empty list of numbers)"
    ),
    "environment": 'Invalid "environment" object',
    "environment.windEnabled": "Invalid windEnabled (must be true or false)",
    "environment.windVx": "Invalid windVx (must be a number)",
    "environment.windVy": "Invalid windVy (must be a number)",
    "environment.frictionZones": "Invalid frictionZones (must be a list of zones)",
    "environment.surfaceFrictionZones": (
        "Invalid surfaceFrictionZones (must be a list of zones)"
    ),
    "metadata": 'Missing "metadata" object',
}

RULE_ORDER: dict[str, int] = {key: index for index, key in enumerate(RULE_MESSAGES)}

_REQUIRED_PROPERTY = re.compile(r"^'([^']+)' is a required property")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    """Load the packaged physics profile schema.

    Returns:
        The parsed JSON schema dictionary.
    """
    schema_file = resources.files("pitchsense").joinpath(
        "schemas/physics_profile.schema.json"
    )
    with schema_file.open(encoding="utf-8") as f:
        return json.load(f)


def _create_validator() -> Draft7Validator:
    """Create a Draft-07 validator for physics profiles."""
    return Draft7Validator(_load_schema())


def _rule_key(error: jsonschema.ValidationError) -> str:
    """Map a schema error onto the dotted path of the rule it violates."""
    parts: list[str] = []
    for part in error.absolute_path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        elif parts:
            parts.append(f".{part}")
        else:
            parts.append(str(part))

    if error.validator == "required":
        match = _REQUIRED_PROPERTY.match(error.message)
        if match:
            missing = match.group(1)
            parts.append(f".{missing}" if parts else missing)

    return "".join(parts)


# Zone lists and the multiplier key each one uses; the second is the legacy name
ZONE_LISTS: dict[str, str] = {
    "frictionZones": "multiplier",
    "surfaceFrictionZones": "frictionMultiplier",
}


def _zone_list_prefix(key: str) -> str | None:
    for list_name in ZONE_LISTS:
        prefix = f"environment.{list_name}["
        if key.startswith(prefix):
            return prefix
    return None


def _collapse(key: str) -> str:
    """Fold element-level keys into the rule that owns them."""
    prefix = _zone_list_prefix(key)
    if prefix is not None:
        return key[: key.index("]", len(prefix)) + 1]
    if key.startswith("customFriction.coefficients"):
        return "customFriction.coefficients"
    return key


def _message_for(key: str, error: jsonschema.ValidationError) -> str:
    if key in RULE_MESSAGES:
        return RULE_MESSAGES[key]
    prefix = _zone_list_prefix(key)
    if prefix is not None:
        list_name = prefix[len("environment."):-1]
        zone_index = key[len(prefix) - 1:]
        return (
            f"Invalid friction zone {zone_index} in {list_name} "
            f"(needs numeric x1, y1, x2, y2 and {ZONE_LISTS[list_name]} >= 0)"
        )
    return f"{error.message} at path '{key}'"


def _sort_key(key: str) -> tuple[int, str]:
    for prefix in (key, key.split("[")[0]):
        if prefix in RULE_ORDER:
            return RULE_ORDER[prefix], key
    return len(RULE_ORDER), key


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _semantic_errors(candidate: dict[str, Any]) -> dict[str, str]:
    """Checks the schema cannot express (non-finite numbers, step count, inverted zones)."""
    problems: dict[str, str] = {}

    params = candidate.get("parameters")
    if isinstance(params, dict):
        for name in PARAMETER_KEYS:
            value = params.get(name)
            if isinstance(value, float) and not math.isfinite(value):
                key = f"parameters.{name}"
                problems[key] = RULE_MESSAGES[key]

        max_time = params.get("maxPredictionTime")
        time_step = params.get("timeStep")
        if (
            _is_number(max_time)
            and _is_number(time_step)
            and math.isfinite(max_time)
            and time_step > 0
            and max_time / time_step > MAX_SIMULATION_STEPS
        ):
            problems["parameters.stepCount"] = RULE_MESSAGES["parameters.stepCount"]

    env = candidate.get("environment")
    if not isinstance(env, dict):
        return problems

    for list_name in ZONE_LISTS:
        zones = env.get(list_name)
        if not isinstance(zones, list):
            continue
        for index, zone in enumerate(zones):
            if not isinstance(zone, dict):
                continue
            x1, y1, x2, y2 = (zone.get(k) for k in ("x1", "y1", "x2", "y2"))
            if all(_is_number(v) for v in (x1, y1, x2, y2)) and (x1 > x2 or y1 > y2):
                key = f"environment.{list_name}[{index}]"
                problems[key] = (
                    f"Invalid friction zone [{index}] in {list_name} "
                    "(x1 must be <= x2 and y1 <= y2)"
                )

    return problems


def validate(candidate: Any) -> ValidationResult:
    """Validate an untyped profile document.

    Args:
        candidate: Parsed JSON document (any type is accepted)

    Returns:
        ValidationResult with ``valid`` and the ordered error messages
    """
    if not isinstance(candidate, dict):
        return ValidationResult(valid=False, errors=[RULE_MESSAGES[""]])

    failures: dict[str, str] = {}
    for error in _create_validator().iter_errors(candidate):
        key = _collapse(_rule_key(error))
        failures.setdefault(key, _message_for(key, error))

    for key, message in _semantic_errors(candidate).items():
        failures.setdefault(key, message)

    errors = [failures[key] for key in sorted(failures, key=_sort_key)]
    return ValidationResult(valid=not errors, errors=errors)
