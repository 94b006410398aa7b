"""Tests for the key-value stores and the ride store adapter."""

from __future__ import annotations

import json

import pytest

from tracker.core.errors import StoreFailure
from tracker.core.models import RideRecord
from tracker.storage.file_storage import FileKeyValueStore
from tracker.storage.memory_storage import MemoryKeyValueStore
from tracker.storage.rides import RIDES_KEY, RideStoreAdapter

from conftest import make_fix


def _record(started_at: str = "2024-05-04T08:15:30.123+00:00") -> RideRecord:
    return RideRecord(
        started_at=started_at,
        distance_km=12.345678901234567,
        average_speed_kmh=21.098765432109876,
        duration_seconds=2106.789,
        positions=(
            make_fix(45.764043, 4.835659, 1714810530123, accuracy=4.5, speed=5.25),
            make_fix(45.7641, 4.8357, 1714810531123, accuracy=12.0),
        ),
    )


def test_file_store_get_missing_key(tmp_path):
    store = FileKeyValueStore(tmp_path / "kv")
    assert store.get("rides") is None


def test_file_store_put_then_get(tmp_path):
    store = FileKeyValueStore(tmp_path / "kv")
    store.put("rides", "[1,2]")
    store.put("rides", "[1,2,3]")
    assert store.get("rides") == "[1,2,3]"
    # No temp files left behind.
    assert [p.name for p in (tmp_path / "kv").iterdir()] == ["rides.json"]


def test_file_store_rejects_path_like_keys(tmp_path):
    store = FileKeyValueStore(tmp_path / "kv")
    with pytest.raises(ValueError):
        store.put("../escape", "x")


def test_empty_store_lists_no_rides():
    assert RideStoreAdapter(MemoryKeyValueStore()).list_rides() == []


def test_rides_survive_a_new_adapter(tmp_path):
    first = _record()
    second = _record("2024-05-05T07:00:00.000+00:00")
    RideStoreAdapter(FileKeyValueStore(tmp_path / "kv")).append_ride(first)
    RideStoreAdapter(FileKeyValueStore(tmp_path / "kv")).append_ride(second)

    rides = RideStoreAdapter(FileKeyValueStore(tmp_path / "kv")).list_rides()
    assert rides == [first, second]
    assert rides[0].started_at == "2024-05-04T08:15:30.123+00:00"
    assert rides[0].positions[1].reported_speed_mps is None


def test_stored_shape_uses_record_field_names():
    store = MemoryKeyValueStore()
    RideStoreAdapter(store).append_ride(_record())

    raw = json.loads(store.get(RIDES_KEY))
    assert set(raw[0]) == {"startedAt", "distanceKm", "averageSpeedKmh",
                           "durationSeconds", "positions"}
    assert raw[0]["positions"][0] == {
        "latitude": 45.764043,
        "longitude": 4.835659,
        "timestamp": 1714810530123,
        "accuracy": 4.5,
        "speed": 5.25,
    }


def test_reads_rides_written_without_accuracy():
    store = MemoryKeyValueStore()
    store.put(RIDES_KEY, json.dumps([{
        "startedAt": "2024-01-01T10:00:00.000Z",
        "distanceKm": 3.2,
        "averageSpeedKmh": 16.0,
        "durationSeconds": 720,
        "positions": [{"latitude": 1.0, "longitude": 2.0, "timestamp": 5}],
    }]))

    ride = RideStoreAdapter(store).list_rides()[0]
    assert ride.duration_minutes == 12
    assert ride.positions[0].accuracy_m == 0.0


@pytest.mark.parametrize("raw", ["not json", '{"a": 1}', '[{"startedAt": "x"}]'])
def test_malformed_store_raises_store_failure(raw):
    store = MemoryKeyValueStore()
    store.put(RIDES_KEY, raw)
    with pytest.raises(StoreFailure):
        RideStoreAdapter(store).list_rides()


def test_write_error_wrapped_as_store_failure():
    class BrokenStore(MemoryKeyValueStore):
        def put(self, key, value):
            raise OSError("read-only file system")

    with pytest.raises(StoreFailure) as exc_info:
        RideStoreAdapter(BrokenStore()).append_ride(_record())
    assert isinstance(exc_info.value.__cause__, OSError)


def test_non_finite_values_never_written():
    store = MemoryKeyValueStore()
    adapter = RideStoreAdapter(store)
    adapter.append_ride(_record())
    before = store.get(RIDES_KEY)

    bad = RideRecord(
        started_at="2024-05-06T09:00:00.000+00:00",
        distance_km=float("nan"),
        average_speed_kmh=float("inf"),
        duration_seconds=60.0,
    )
    with pytest.raises(StoreFailure):
        adapter.append_ride(bad)

    assert store.get(RIDES_KEY) == before
    assert adapter.list_rides() == [_record()]
