"""Configuration management for pitchsense."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import tomllib

from .field_constants import FieldBounds
from .profiles.store import DEFAULT_POLL_INTERVAL, get_default_slot_path


class ConfigError(Exception):
    """Configuration error."""

    pass


# Ring buffer capacity bounds for per-agent captures
MIN_CAPTURE_CAPACITY = 5
MAX_CAPTURE_CAPACITY = 10

DEFAULT_MODEL = "claude-sonnet-4-5"


@dataclass
class FieldConfig:
    width: float = 1000.0
    height: float = 600.0

    @property
    def bounds(self) -> FieldBounds:
        return FieldBounds(width=self.width, height=self.height)


@dataclass
class SchedulerConfig:
    capture_interval_ms: int = 500
    decision_interval_s: float = 5.0
    capture_capacity: int = 10
    max_capture_refs: int = 3
    decision_timeout_s: float = 30.0


@dataclass
class ProfilesConfig:
    slot_path: Path = field(default_factory=get_default_slot_path)
    poll_interval_s: float = DEFAULT_POLL_INTERVAL


@dataclass
class CollaboratorConfig:
    model: str = DEFAULT_MODEL
    max_tokens: int = 500
    temperature: float = 0.7
    api_key_env: str = "ANTHROPIC_API_KEY"


@dataclass
class PitchSenseConfig:
    pitch: FieldConfig = field(default_factory=FieldConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    profiles: ProfilesConfig = field(default_factory=ProfilesConfig)
    collaborator: CollaboratorConfig = field(default_factory=CollaboratorConfig)

    def validate(self) -> None:
        """Validate configuration, raising ConfigError if invalid."""
        if self.pitch.width <= 0 or self.pitch.height <= 0:
            raise ConfigError(
                f"Invalid field size {self.pitch.width} x {self.pitch.height}. "
                "Width and height in [pitch] must be > 0"
            )

        scheduler = self.scheduler
        if scheduler.capture_interval_ms <= 0:
            raise ConfigError(
                f"Invalid capture_interval_ms '{scheduler.capture_interval_ms}'. "
                "Must be > 0"
            )
        if scheduler.decision_interval_s <= 0:
            raise ConfigError(
                f"Invalid decision_interval_s '{scheduler.decision_interval_s}'. "
                "Must be > 0"
            )
        if not MIN_CAPTURE_CAPACITY <= scheduler.capture_capacity <= MAX_CAPTURE_CAPACITY:
            raise ConfigError(
                f"Invalid capture_capacity '{scheduler.capture_capacity}'. "
                f"Must be between {MIN_CAPTURE_CAPACITY} and {MAX_CAPTURE_CAPACITY}"
            )
        if not 0 <= scheduler.max_capture_refs <= scheduler.capture_capacity:
            raise ConfigError(
                f"Invalid max_capture_refs '{scheduler.max_capture_refs}'. "
                "Must be between 0 and capture_capacity"
            )
        if scheduler.decision_timeout_s <= 0:
            raise ConfigError(
                f"Invalid decision_timeout_s '{scheduler.decision_timeout_s}'. "
                "Must be > 0"
            )

        if self.profiles.poll_interval_s < 0:
            raise ConfigError(
                f"Invalid poll_interval_s '{self.profiles.poll_interval_s}'. "
                "Must be >= 0"
            )

        collaborator = self.collaborator
        if not collaborator.model.strip():
            raise ConfigError("Configuration requires a model in [collaborator]")
        if collaborator.max_tokens <= 0:
            raise ConfigError(
                f"Invalid max_tokens '{collaborator.max_tokens}'. Must be > 0"
            )
        if not 0.0 <= collaborator.temperature <= 1.0:
            raise ConfigError(
                f"Invalid temperature '{collaborator.temperature}'. "
                "Must be between 0 and 1"
            )


def default_config() -> PitchSenseConfig:
    """Configuration with every default, without reading a file."""
    return PitchSenseConfig()


def load_config(config_path: Path) -> PitchSenseConfig:
    """Load configuration from TOML file."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    defaults = PitchSenseConfig()

    field_data = data.get("pitch", {})
    field_config = FieldConfig(
        width=float(field_data.get("width", defaults.pitch.width)),
        height=float(field_data.get("height", defaults.pitch.height)),
    )

    scheduler_data = data.get("scheduler", {})
    scheduler = SchedulerConfig(
        capture_interval_ms=int(
            scheduler_data.get(
                "capture_interval_ms", defaults.scheduler.capture_interval_ms
            )
        ),
        decision_interval_s=float(
            scheduler_data.get(
                "decision_interval_s", defaults.scheduler.decision_interval_s
            )
        ),
        capture_capacity=int(
            scheduler_data.get("capture_capacity", defaults.scheduler.capture_capacity)
        ),
        max_capture_refs=int(
            scheduler_data.get("max_capture_refs", defaults.scheduler.max_capture_refs)
        ),
        decision_timeout_s=float(
            scheduler_data.get(
                "decision_timeout_s", defaults.scheduler.decision_timeout_s
            )
        ),
    )

    profiles_data = data.get("profiles", {})
    slot_path = profiles_data.get("slot_path")
    profiles = ProfilesConfig(
        slot_path=(
            Path(slot_path).expanduser() if slot_path else defaults.profiles.slot_path
        ),
        poll_interval_s=float(
            profiles_data.get("poll_interval_s", defaults.profiles.poll_interval_s)
        ),
    )

    collaborator_data = data.get("collaborator", {})
    collaborator = CollaboratorConfig(
        model=collaborator_data.get("model", defaults.collaborator.model),
        max_tokens=int(
            collaborator_data.get("max_tokens", defaults.collaborator.max_tokens)
        ),
        temperature=float(
            collaborator_data.get("temperature", defaults.collaborator.temperature)
        ),
        api_key_env=collaborator_data.get(
            "api_key_env", defaults.collaborator.api_key_env
        ),
    )

    return PitchSenseConfig(
        pitch=field_config,
        scheduler=scheduler,
        profiles=profiles,
        collaborator=collaborator,
    )


def get_default_config_path() -> Path:
    """Get the default config file path."""
    return Path.home() / ".pitchsense" / "config.toml"
