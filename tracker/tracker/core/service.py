"""Ride service — the session plus what the API needs around it.

This is the core business logic behind the HTTP layer. It depends on the
LocationSensor and KeyValueStore protocols, not concrete implementations.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from tracker.core.session import RideSession
from tracker.storage.rides import RideStoreAdapter

if TYPE_CHECKING:
    from tracker.core.errors import SensorDeliveryError
    from tracker.core.models import Fix, RideRecord
    from tracker.core.stats import TrackerStats
    from tracker.sensor.push import PushSensor
    from tracker.storage.base import KeyValueStore


log = structlog.get_logger()


@dataclass(frozen=True)
class Notification:
    """A user-visible message the rider has not seen yet."""
    kind: str
    message: str
    at_ms: int


class RideService:
    """Owns the rider's session, sensor feed and ride history."""

    def __init__(
        self,
        sensor: PushSensor,
        store: KeyValueStore,
        stats: TrackerStats,
        max_notifications: int = 50,
    ) -> None:
        self.sensor = sensor
        self.rides = RideStoreAdapter(store)
        self._stats = stats
        self._notifications: deque[Notification] = deque(maxlen=max_notifications)
        self.session = RideSession(
            sensor=sensor,
            rides=self.rides,
            stats=stats,
            on_error=self._on_delivery_error,
        )

    def _on_delivery_error(self, error: SensorDeliveryError) -> None:
        self._notifications.append(Notification(
            kind="sensor_error",
            message=error.message,
            at_ms=int(time.time() * 1000),
        ))

    def drain_notifications(self) -> list[Notification]:
        """Return pending notifications, oldest first, and forget them."""
        pending = list(self._notifications)
        self._notifications.clear()
        return pending

    def push_fixes(self, fixes: list[Fix]) -> int:
        """Feed fixes to the sensor in order. Returns how many reached a subscriber."""
        delivered = 0
        for fix in fixes:
            if self.sensor.push_fix(fix):
                delivered += 1
        if delivered < len(fixes):
            log.debug("fixes_without_subscriber", count=len(fixes) - delivered)
        return delivered

    def push_error(self, message: str) -> bool:
        return self.sensor.push_error(message) > 0

    def history(self) -> list[RideRecord]:
        """Saved rides, most recent first."""
        rides = self.rides.list_rides()
        rides.reverse()
        return rides
