"""In-process sensor fed by fixes pushed from outside (the HTTP API, tests).

Each push is delivered synchronously, in order, to every live subscription.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tracker.core.models import Fix, SensorOptions
    from tracker.sensor.base import ErrorCallback, FixCallback

log = structlog.get_logger()


@dataclass
class _Watch:
    on_fix: FixCallback
    on_error: ErrorCallback
    options: SensorOptions


class PushSensor:
    """LocationSensor whose fixes come from push_fix()/push_error()."""

    def __init__(self, available: bool = True) -> None:
        self._available = available
        self._ids = itertools.count(1)
        self._watches: dict[int, _Watch] = {}

    @property
    def available(self) -> bool:
        return self._available

    @property
    def active_subscriptions(self) -> int:
        return len(self._watches)

    def subscribe(
        self,
        on_fix: FixCallback,
        on_error: ErrorCallback,
        options: SensorOptions,
    ) -> int:
        handle = next(self._ids)
        self._watches[handle] = _Watch(on_fix, on_error, options)
        log.debug("sensor_subscribed", handle=handle,
                  high_accuracy=options.high_accuracy,
                  timeout_ms=options.timeout_ms)
        return handle

    def unsubscribe(self, handle: int) -> None:
        if self._watches.pop(handle, None) is not None:
            log.debug("sensor_unsubscribed", handle=handle)

    def push_fix(self, fix: Fix) -> int:
        """Deliver a fix to every subscriber. Returns how many were reached."""
        watches = list(self._watches.values())
        for watch in watches:
            watch.on_fix(fix)
        return len(watches)

    def push_error(self, message: str) -> int:
        """Deliver a failure to every subscriber. Returns how many were reached."""
        watches = list(self._watches.values())
        for watch in watches:
            watch.on_error(message)
        return len(watches)
