"""Shared test fixtures."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

import tracker.main as main_module
from tracker.config import AppConfig
from tracker.core.models import Fix
from tracker.core.session import RideSession
from tracker.core.stats import TrackerStats
from tracker.sensor.push import PushSensor
from tracker.storage.memory_storage import MemoryKeyValueStore
from tracker.storage.rides import RideStoreAdapter


def make_fix(lat: float, lon: float, t_ms: int, accuracy: float = 5.0,
             speed: float | None = None) -> Fix:
    return Fix(latitude=lat, longitude=lon, timestamp_ms=t_ms,
               accuracy_m=accuracy, reported_speed_mps=speed)


@pytest.fixture(autouse=True)
def _init_tracker(tmp_path):
    """Initialize tracker singletons for every test, using a temp directory."""
    config = AppConfig()
    config.storage.base_dir = str(tmp_path / "store")
    config.logging.level = "warning"

    stats = TrackerStats()
    service = main_module.build_service(config, stats)

    # Patch module-level singletons
    main_module._config = config
    main_module._stats = stats
    main_module._service = service

    yield

    # Cleanup
    main_module._config = None
    main_module._stats = None
    main_module._service = None


@pytest.fixture
def sensor():
    return PushSensor()


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def rides(store):
    return RideStoreAdapter(store)


@pytest.fixture
def stats():
    return TrackerStats()


@pytest.fixture
def session(sensor, rides, stats):
    return RideSession(sensor=sensor, rides=rides, stats=stats)


@pytest.fixture
async def client():
    from tracker.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
