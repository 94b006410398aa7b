"""RideLog — core internal data models.

These are plain dataclasses with no framework dependencies.
JSON payloads are converted to/from these at the boundary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from tracker.core.errors import InvalidTransition


@dataclass(frozen=True)
class Fix:
    """A single position sample reported by the location sensor."""
    latitude: float
    longitude: float
    timestamp_ms: int
    accuracy_m: float
    reported_speed_mps: float | None = None


@dataclass(frozen=True)
class SensorOptions:
    high_accuracy: bool = True
    timeout_ms: int = 5000
    max_cached_age_ms: int = 0


# Every subscription asks for fresh, high-accuracy fixes.
TRACKING_OPTIONS = SensorOptions()


class Lifecycle(enum.Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    PAUSED = "paused"

    def after(self, action: str) -> Lifecycle:
        """Return the state reached by applying ``action``, or raise."""
        target = _TRANSITIONS.get((self, action))
        if target is None:
            raise InvalidTransition(self.value, action)
        return target


_TRANSITIONS: dict[tuple[Lifecycle, str], Lifecycle] = {
    (Lifecycle.IDLE, "start"): Lifecycle.TRACKING,
    (Lifecycle.PAUSED, "start"): Lifecycle.TRACKING,
    (Lifecycle.TRACKING, "pause"): Lifecycle.PAUSED,
    (Lifecycle.TRACKING, "stop"): Lifecycle.IDLE,
    (Lifecycle.PAUSED, "stop"): Lifecycle.IDLE,
}


@dataclass(frozen=True)
class RideRecord:
    """A finalized ride. Built once at stop time and never mutated."""
    started_at: str
    distance_km: float
    average_speed_kmh: float
    duration_seconds: float
    positions: tuple[Fix, ...] = ()

    @property
    def duration_minutes(self) -> int:
        return int(self.duration_seconds // 60)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of the session state, safe to hand to display code."""
    lifecycle: Lifecycle
    distance_km: float
    current_speed_kmh: float
    positions: tuple[Fix, ...]
    speed_window: tuple[float, ...]

    @property
    def fix_count(self) -> int:
        return len(self.positions)
