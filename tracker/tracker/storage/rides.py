"""Ride store adapter — ride records to/from the key-value record store.

All rides live as one JSON array under RIDES_KEY, oldest first. Field names
keep the shape the phone app has always written:

    {"startedAt": "...", "distanceKm": 1.2, "averageSpeedKmh": 18.4,
     "durationSeconds": 240.0,
     "positions": [{"latitude": .., "longitude": .., "timestamp": ..,
                    "accuracy": .., "speed": null}, ...]}

json.dumps writes floats with repr(), so values round-trip exactly. NaN and
infinities are refused rather than written.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

from tracker.core.errors import StoreFailure
from tracker.core.models import Fix, RideRecord

if TYPE_CHECKING:
    from tracker.storage.base import KeyValueStore

log = structlog.get_logger()

RIDES_KEY = "rides"


def fix_to_dict(fix: Fix) -> dict[str, Any]:
    return {
        "latitude": fix.latitude,
        "longitude": fix.longitude,
        "timestamp": fix.timestamp_ms,
        "accuracy": fix.accuracy_m,
        "speed": fix.reported_speed_mps,
    }


def fix_from_dict(data: dict[str, Any]) -> Fix:
    speed = data.get("speed")
    return Fix(
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        timestamp_ms=int(data["timestamp"]),
        accuracy_m=float(data.get("accuracy", 0.0)),
        reported_speed_mps=None if speed is None else float(speed),
    )


def record_to_dict(record: RideRecord) -> dict[str, Any]:
    return {
        "startedAt": record.started_at,
        "distanceKm": record.distance_km,
        "averageSpeedKmh": record.average_speed_kmh,
        "durationSeconds": record.duration_seconds,
        "positions": [fix_to_dict(p) for p in record.positions],
    }


def record_from_dict(data: dict[str, Any]) -> RideRecord:
    return RideRecord(
        started_at=str(data["startedAt"]),
        distance_km=float(data["distanceKm"]),
        average_speed_kmh=float(data["averageSpeedKmh"]),
        duration_seconds=float(data["durationSeconds"]),
        positions=tuple(fix_from_dict(p) for p in data.get("positions", [])),
    )


class RideStoreAdapter:
    """Append-only, read-all list of rides over a KeyValueStore."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def _load_raw(self) -> list[dict[str, Any]]:
        try:
            raw = self._store.get(RIDES_KEY)
        except Exception as e:
            log.error("store_read_failed", key=RIDES_KEY, exc_info=True)
            raise StoreFailure(f"could not read rides: {e}") from e

        if not raw:
            return []
        try:
            rides = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreFailure(f"stored rides are not valid JSON: {e}") from e
        if not isinstance(rides, list):
            raise StoreFailure("stored rides are not a JSON array")
        return rides

    def list_rides(self) -> list[RideRecord]:
        """All saved rides, in the order they were appended."""
        try:
            return [record_from_dict(r) for r in self._load_raw()]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailure(f"malformed ride record: {e}") from e

    def append_ride(self, record: RideRecord) -> None:
        rides = self._load_raw()
        rides.append(record_to_dict(record))
        try:
            self._store.put(RIDES_KEY, json.dumps(rides, separators=(",", ":"), allow_nan=False))
        except Exception as e:
            log.error("store_write_failed", key=RIDES_KEY, exc_info=True)
            raise StoreFailure(f"could not save ride: {e}") from e

        log.info("ride_saved", started_at=record.started_at,
                 distance_km=round(record.distance_km, 3),
                 positions=len(record.positions), total_rides=len(rides))
