"""Physics profiles: data model and validation."""

from .types import DEFAULT_PROFILE, PhysicsProfile
from .validation import ValidationResult, validate

__all__ = ["DEFAULT_PROFILE", "PhysicsProfile", "ValidationResult", "validate"]
