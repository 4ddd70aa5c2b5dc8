"""
Exception types for the aim-lab shot-resolution engine.

None of these are fatal to a session. The session controller catches the
recoverable ones at its boundary, logs them, and degrades gracefully:

- TargetNotFoundError: a respawn referenced an id that is no longer live.
- DegenerateGeometryError: the fire ray never crosses the miss-projection plane.
- SessionEndedError: something tried to append to a frozen shot log.
- ConfigError: a session configuration value could not be understood.
"""


class AimLabError(Exception):
    """Base class for every error raised by the aimlab package."""


class TargetNotFoundError(AimLabError, KeyError):
    """Raised when a target id is not present in the target store."""

    def __init__(self, target_id: str):
        super().__init__(target_id)
        self.target_id = target_id

    def __str__(self) -> str:
        return f"Target '{self.target_id}' is not live"


class DegenerateGeometryError(AimLabError, ValueError):
    """Raised when a ray/plane intersection has no usable solution."""


class SessionEndedError(AimLabError, RuntimeError):
    """Raised when the shot log is mutated after the session has ended."""


class ConfigError(AimLabError, ValueError):
    """Raised for invalid session configuration values."""
