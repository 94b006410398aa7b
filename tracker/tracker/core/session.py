"""Ride session — the acquisition lifecycle state machine.

Idle --start--> Tracking --pause--> Paused --start--> Tracking
Tracking/Paused --stop--> Idle

The session owns its state outright. Fixes reach it only through the live
_Subscription, and display code reads it only through snapshot().
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Hashable

import structlog

from tracker.core import signal_filter
from tracker.core.errors import (
    InvalidTransition,
    RideTooShort,
    SensorDeliveryError,
    SensorUnsupported,
    StoreFailure,
)
from tracker.core.geodesy import distance_km
from tracker.core.models import (
    TRACKING_OPTIONS,
    Fix,
    Lifecycle,
    RideRecord,
    SessionSnapshot,
)
from tracker.core.smoother import SpeedSmoother

if TYPE_CHECKING:
    from tracker.core.stats import TrackerStats
    from tracker.sensor.base import LocationSensor
    from tracker.storage.rides import RideStoreAdapter

log = structlog.get_logger()

# A ride needs a start and an end point.
MIN_RIDE_FIXES = 2


class _Subscription:
    """One sensor watch. After cancel() returns, its callbacks do nothing."""

    def __init__(self, sensor: LocationSensor, session: RideSession) -> None:
        self._sensor = sensor
        self._session = session
        self.active = True
        self.handle: Hashable = sensor.subscribe(self._on_fix, self._on_error, TRACKING_OPTIONS)

    def _on_fix(self, fix: Fix) -> None:
        if self.active:
            self._session.on_fix_received(fix)

    def _on_error(self, message: str) -> None:
        if self.active:
            self._session.on_delivery_error(message)

    def cancel(self) -> None:
        self.active = False
        self._sensor.unsubscribe(self.handle)


class RideSession:
    """Tracks one ride at a time and saves it on stop."""

    def __init__(
        self,
        sensor: LocationSensor,
        rides: RideStoreAdapter,
        stats: TrackerStats | None = None,
        on_error: Callable[[SensorDeliveryError], None] | None = None,
    ) -> None:
        self._sensor = sensor
        self._rides = rides
        self._stats = stats
        self._on_error = on_error
        self._subscription: _Subscription | None = None

        self._lifecycle = Lifecycle.IDLE
        self._distance_km = 0.0
        self._positions: list[Fix] = []
        self._smoother = SpeedSmoother()
        self._speed_kmh = 0.0

    @property
    def lifecycle(self) -> Lifecycle:
        return self._lifecycle

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            lifecycle=self._lifecycle,
            distance_km=self._distance_km,
            current_speed_kmh=self._speed_kmh,
            positions=tuple(self._positions),
            speed_window=self._smoother.values(),
        )

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        """Begin a ride, or resume a paused one without touching its totals."""
        if self._lifecycle is Lifecycle.TRACKING:
            log.warning("start_ignored", reason="already_tracking")
            return

        if not self._sensor.available:
            log.warning("sensor_unsupported", lifecycle=self._lifecycle.value)
            raise SensorUnsupported()

        resuming = self._lifecycle is Lifecycle.PAUSED
        next_state = self._lifecycle.after("start")
        if not resuming:
            self._reset()

        self._subscription = _Subscription(self._sensor, self)
        self._lifecycle = next_state

        if resuming:
            log.info("ride_resumed", fixes=len(self._positions),
                     distance_km=round(self._distance_km, 3))
        else:
            if self._stats is not None:
                self._stats.record_ride_started()
            log.info("ride_started")

    def resume(self) -> None:
        if self._lifecycle is not Lifecycle.PAUSED:
            raise InvalidTransition(self._lifecycle.value, "resume")
        self.start()

    def pause(self) -> None:
        if self._lifecycle is not Lifecycle.TRACKING:
            return
        self._cancel_subscription()
        self._lifecycle = self._lifecycle.after("pause")
        log.info("ride_paused", fixes=len(self._positions),
                 distance_km=round(self._distance_km, 3))

    def stop(self) -> RideRecord:
        """Finish the ride and persist it.

        Raises RideTooShort (session reset, nothing saved) when fewer than
        two fixes were accepted. Raises StoreFailure when the save fails; the
        session is then left Paused with its data intact so stop() can be
        retried or the ride discarded.
        """
        next_state = self._lifecycle.after("stop")
        self._cancel_subscription()

        accepted = len(self._positions)
        if accepted < MIN_RIDE_FIXES:
            self._reset()
            self._lifecycle = next_state
            if self._stats is not None:
                self._stats.record_ride_too_short()
            log.warning("ride_too_short", accepted=accepted)
            raise RideTooShort(accepted)

        record = self._build_record()
        try:
            self._rides.append_ride(record)
        except StoreFailure:
            self._lifecycle = Lifecycle.PAUSED
            if self._stats is not None:
                self._stats.record_store_failure()
            log.error("ride_save_failed", fixes=accepted,
                      distance_km=round(record.distance_km, 3))
            raise

        self._reset()
        self._lifecycle = next_state
        if self._stats is not None:
            self._stats.record_ride_saved()
        log.info("ride_stopped", started_at=record.started_at,
                 distance_km=round(record.distance_km, 3),
                 duration_seconds=record.duration_seconds,
                 average_speed_kmh=round(record.average_speed_kmh, 1))
        return record

    def discard(self) -> None:
        """Drop the current ride without saving it."""
        self._cancel_subscription()
        had_data = bool(self._positions)
        self._reset()
        self._lifecycle = Lifecycle.IDLE
        if had_data and self._stats is not None:
            self._stats.record_ride_discarded()
        log.info("ride_discarded", had_data=had_data)

    # -- sensor callbacks --------------------------------------------------

    def on_fix_received(self, fix: Fix) -> None:
        if self._lifecycle is not Lifecycle.TRACKING:
            log.debug("fix_ignored", lifecycle=self._lifecycle.value)
            return

        if not signal_filter.accept(fix):
            if self._stats is not None:
                self._stats.record_fix(fix.timestamp_ms, accepted=False)
            log.debug("fix_rejected", accuracy_m=fix.accuracy_m)
            return

        previous = self._positions[-1] if self._positions else None
        self._positions.append(fix)
        if previous is not None:
            self._distance_km += distance_km(previous, fix)

        speed = signal_filter.instantaneous_speed_kmh(fix, previous)
        self._speed_kmh = self._smoother.push(speed)

        if self._stats is not None:
            self._stats.record_fix(fix.timestamp_ms, accepted=True)
        log.debug("fix_accepted", fixes=len(self._positions),
                  distance_km=round(self._distance_km, 4),
                  speed_kmh=round(self._speed_kmh, 1))

    def on_delivery_error(self, message: str) -> None:
        if self._stats is not None:
            self._stats.record_delivery_error()
        log.warning("sensor_delivery_error", message=message,
                    lifecycle=self._lifecycle.value)
        if self._on_error is not None:
            self._on_error(SensorDeliveryError(message))

    # -- internals ---------------------------------------------------------

    def _cancel_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _build_record(self) -> RideRecord:
        first, last = self._positions[0], self._positions[-1]
        duration_s = max(0.0, (last.timestamp_ms - first.timestamp_ms) / 1000)

        # Paused time is included: duration runs from first to last fix.
        if duration_s > 0:
            average_kmh = self._distance_km / (duration_s / 3600)
        else:
            log.warning("ride_duration_zero", fixes=len(self._positions))
            average_kmh = 0.0

        started = datetime.fromtimestamp(first.timestamp_ms / 1000, tz=timezone.utc)
        return RideRecord(
            started_at=started.isoformat(timespec="milliseconds"),
            distance_km=self._distance_km,
            average_speed_kmh=average_kmh,
            duration_seconds=duration_s,
            positions=tuple(self._positions),
        )

    def _reset(self) -> None:
        self._distance_km = 0.0
        self._positions = []
        self._smoother.reset()
        self._speed_kmh = 0.0
