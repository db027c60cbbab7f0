"""Active profile persistence.

Exactly one named slot holds the active custom profile; an empty slot means
the default profile is in force. Readers go through ``CachedProfileLoader``
which re-reads the slot at most once per poll interval.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable

from ..errors import ProfileSlotError
from .types import DEFAULT_PROFILE, PhysicsProfile
from .validation import ValidationResult, validate

logger = logging.getLogger(__name__)

DEFAULT_SLOT_NAME = "active_profile.json"
DEFAULT_POLL_INTERVAL = 1.0  # Seconds


def get_default_slot_path() -> Path:
    """Get the default slot file path."""
    return Path.home() / ".pitchsense" / DEFAULT_SLOT_NAME


class ProfileSlot:
    """The single persisted slot for the active custom profile."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path).expanduser() if path else get_default_slot_path()

    def read(self) -> dict[str, Any] | None:
        """Return the stored document, or None when the slot is empty.

        Raises:
            ProfileSlotError: If the slot exists but cannot be read or parsed
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProfileSlotError(str(self.path), e) from e

    def write(self, document: dict[str, Any]) -> None:
        """Write the document atomically to avoid partial writes."""
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except OSError as e:
            raise ProfileSlotError(str(self.path), e) from e
        finally:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise ProfileSlotError(str(self.path), e) from e


def load_active(slot: ProfileSlot) -> PhysicsProfile | None:
    """Load the stored custom profile.

    Returns None when the slot is empty, unreadable, or holds a document
    that no longer validates or cannot be built into a profile.
    """
    try:
        document = slot.read()
    except ProfileSlotError as e:
        logger.warning(f"Ignoring stored profile: {e}")
        return None

    if document is None:
        return None

    result = validate(document)
    if not result.valid:
        logger.warning(
            f"Ignoring stored profile in {slot.path}: {'; '.join(result.errors)}"
        )
        return None

    try:
        return PhysicsProfile.from_dict(document)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(
            f"Ignoring stored profile in {slot.path}: cannot build profile ({e!r})"
        )
        return None


def activate(candidate: Any, slot: ProfileSlot) -> ValidationResult:
    """Validate a candidate and, only if every rule passes, store it.

    A failing candidate leaves the slot untouched.

    Raises:
        ProfileSlotError: If the slot cannot be written
    """
    result = validate(candidate)
    if not result.valid:
        return result

    slot.write(candidate)
    logger.info(f"Activated physics profile '{candidate['name']}' v{candidate['version']}")
    return result


def clear_active(slot: ProfileSlot) -> None:
    """Empty the slot so the default profile is used."""
    slot.clear()
    logger.info(f"Cleared active physics profile; using {DEFAULT_PROFILE.name}")


class CachedProfileLoader:
    """Serve the active profile, re-reading the slot at most once per interval.

    Example:
        loader = CachedProfileLoader(ProfileSlot())
        profile = loader.get()  # PhysicsProfile or None for the default
    """

    def __init__(
        self,
        slot: ProfileSlot,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.slot = slot
        self.poll_interval = poll_interval
        self._clock = clock
        self._cached: PhysicsProfile | None = None
        self._last_check: float | None = None

    def get(self) -> PhysicsProfile | None:
        now = self._clock()
        if self._last_check is None or now - self._last_check >= self.poll_interval:
            self._last_check = now
            self._cached = load_active(self.slot)
        return self._cached

    def resolve(self) -> PhysicsProfile:
        """Return the active profile, substituting the default."""
        return self.get() or DEFAULT_PROFILE

    def invalidate(self) -> None:
        """Force the next ``get`` to re-read the slot."""
        self._last_check = None

    def is_custom_active(self) -> bool:
        return self.get() is not None

    def active_profile_name(self) -> str:
        return self.resolve().name
