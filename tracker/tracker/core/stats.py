"""Tracker statistics.

In-memory counters over fixes, sensor errors and saved rides.
No framework dependencies.
"""

from __future__ import annotations

import threading
import time


class TrackerStats:
    """Thread-safe counters, read through snapshot().

    Fixes are counted as they arrive at the session: ``fixes_received`` is
    always ``fixes_accepted + fixes_rejected``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = time.time()

        self.fixes_received: int = 0
        self.fixes_accepted: int = 0
        self.fixes_rejected: int = 0
        self.delivery_errors: int = 0
        self.rides_started: int = 0
        self.rides_saved: int = 0
        self.rides_too_short: int = 0
        self.rides_discarded: int = 0
        self.store_failures: int = 0
        self.last_fix_ms: int | None = None

    def record_fix(self, timestamp_ms: int, *, accepted: bool) -> None:
        with self._lock:
            self.fixes_received += 1
            if accepted:
                self.fixes_accepted += 1
                self.last_fix_ms = timestamp_ms
            else:
                self.fixes_rejected += 1

    def record_delivery_error(self) -> None:
        with self._lock:
            self.delivery_errors += 1

    def record_ride_started(self) -> None:
        with self._lock:
            self.rides_started += 1

    def record_ride_saved(self) -> None:
        with self._lock:
            self.rides_saved += 1

    def record_ride_too_short(self) -> None:
        with self._lock:
            self.rides_too_short += 1

    def record_ride_discarded(self) -> None:
        with self._lock:
            self.rides_discarded += 1

    def record_store_failure(self) -> None:
        with self._lock:
            self.store_failures += 1

    def snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of all stats."""
        with self._lock:
            return {
                "uptime_seconds": round(time.time() - self._started_at, 1),
                "fixes": {
                    "received": self.fixes_received,
                    "accepted": self.fixes_accepted,
                    "rejected": self.fixes_rejected,
                    "last_accepted_ms": self.last_fix_ms,
                },
                "delivery_errors": self.delivery_errors,
                "rides": {
                    "started": self.rides_started,
                    "saved": self.rides_saved,
                    "too_short": self.rides_too_short,
                    "discarded": self.rides_discarded,
                },
                "store_failures": self.store_failures,
            }
