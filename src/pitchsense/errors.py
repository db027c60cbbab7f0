"""Custom exceptions for pitchsense with structured error information."""

from __future__ import annotations


class PitchSenseError(Exception):
    """Base exception for all pitchsense errors.

    Provides structured error information with actionable messages.
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ProfileValidationError(PitchSenseError):
    """Raised when a candidate physics profile fails validation."""

    def __init__(self, errors: list[str], source: str = None):
        count = len(errors)
        message = f"Physics profile is invalid ({count} error{'s' if count != 1 else ''})"
        if source:
            message = f"{message}: {source}"

        details = {
            "errors": list(errors),
            "source": source,
            "suggested_action": (
                "Fix the listed fields and re-import; the previous profile stays active"
            ),
        }
        super().__init__(message, details)
        self.errors = list(errors)


class SimulationFault(PitchSenseError):
    """Raised when a profile cannot be integrated (bad model or non-finite state)."""

    def __init__(self, profile_name: str, reason: str):
        message = f"Simulation failed under profile '{profile_name}': {reason}"
        details = {
            "profile_name": profile_name,
            "reason": reason,
            "suggested_action": (
                "Benchmark the profile before activating it or clear the active profile"
            ),
        }
        super().__init__(message, details)
        self.profile_name = profile_name
        self.reason = reason


class CollaboratorFailure(PitchSenseError):
    """Raised when the decision collaborator errors, times out or answers badly."""

    def __init__(self, agent_id: str, reason: str, original_error: Exception = None):
        message = f"Decision request for agent '{agent_id}' failed: {reason}"
        details = {
            "agent_id": agent_id,
            "reason": reason,
            "error_type": (
                type(original_error).__name__ if original_error is not None else None
            ),
            "suggested_action": "Previous strategy is retained; check API key and model",
        }
        super().__init__(message, details)
        self.agent_id = agent_id
        self.reason = reason


class CaptureFailure(PitchSenseError):
    """Raised when a perceptual capture comes back empty or corrupt."""

    def __init__(self, agent_id: str, reason: str):
        message = f"Capture for agent '{agent_id}' rejected: {reason}"
        details = {
            "agent_id": agent_id,
            "reason": reason,
            "suggested_action": "The rotation slot is skipped; check the capture source",
        }
        super().__init__(message, details)
        self.agent_id = agent_id


class ProfileSlotError(PitchSenseError):
    """Raised when the active profile slot cannot be read or written."""

    def __init__(self, path: str, original_error: Exception):
        message = f"Profile slot error: {path} ({original_error})"
        details = {
            "path": path,
            "original_error": str(original_error),
            "error_type": type(original_error).__name__,
            "suggested_action": "Check file permissions or run 'pitchsense clear'",
        }
        super().__init__(message, details)


class ProfileFileError(PitchSenseError):
    """Raised when a profile file cannot be read as JSON."""

    def __init__(self, path: str, reason: str):
        message = f"Cannot read profile {path}: {reason}"
        details = {
            "path": path,
            "reason": reason,
            "suggested_action": "Check the path and JSON syntax",
        }
        super().__init__(message, details)
