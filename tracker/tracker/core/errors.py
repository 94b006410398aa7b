"""Error kinds raised by the ride-tracking core.

All of them are recoverable: the API layer maps each one to an HTTP status
and the session stays usable afterwards.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for every error the tracker raises on purpose."""


class SensorUnsupported(TrackerError):
    """The location sensor is not available on this host."""

    def __init__(self, message: str = "location sensor is not available") -> None:
        super().__init__(message)


class SensorDeliveryError(TrackerError):
    """A live subscription reported a failure (timeout, permission, no fix)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RideTooShort(TrackerError):
    """stop() was called before two fixes had been accepted."""

    def __init__(self, accepted: int) -> None:
        super().__init__(f"ride needs at least 2 accepted fixes, got {accepted}")
        self.accepted = accepted


class StoreFailure(TrackerError):
    """The ride store could not read or append rides."""


class InvalidTransition(TrackerError):
    """The requested action is not legal from the current lifecycle state."""

    def __init__(self, state: str, action: str) -> None:
        super().__init__(f"cannot {action} while {state}")
        self.state = state
        self.action = action
