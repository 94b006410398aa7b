"""Signal filter — rejects noisy fixes and derives instantaneous speed.

A fix whose accuracy radius exceeds MAX_ACCURACY_M is expected sensor
noise: it is dropped without touching distance, speed or the stored route.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tracker.core.geodesy import distance_km

if TYPE_CHECKING:
    from tracker.core.models import Fix

# Fixes with a larger uncertainty radius (meters) are rejected.
MAX_ACCURACY_M = 20.0

MPS_TO_KMH = 3.6

_MS_PER_HOUR = 1000 * 3600


def accept(fix: Fix) -> bool:
    return fix.accuracy_m <= MAX_ACCURACY_M


def instantaneous_speed_kmh(fix: Fix, previous: Fix | None) -> float:
    """Speed at ``fix`` in km/h, never negative.

    The sensor's own speed wins when present. Otherwise the speed is the
    distance from the previous accepted fix over the elapsed time. A first
    fix without a reported speed, or a non-positive elapsed time, gives 0.
    """
    if fix.reported_speed_mps is not None:
        speed = fix.reported_speed_mps * MPS_TO_KMH
    elif previous is not None:
        elapsed_ms = fix.timestamp_ms - previous.timestamp_ms
        if elapsed_ms <= 0:
            return 0.0
        speed = distance_km(previous, fix) / (elapsed_ms / _MS_PER_HOUR)
    else:
        speed = 0.0
    return max(0.0, speed)
