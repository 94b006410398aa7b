"""RideLog tracker — main entry point.

This is the only file that knows about concrete implementations.
It wires together the core, sensor, storage, and API layers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from tracker.api.monitoring import router as monitoring_router
from tracker.api.ride import router as ride_router
from tracker.api.sensor import router as sensor_router
from tracker.config import AppConfig, load_config
from tracker.core.service import RideService
from tracker.core.stats import TrackerStats
from tracker.sensor.push import PushSensor
from tracker.storage.file_storage import FileKeyValueStore
from tracker.storage.memory_storage import MemoryKeyValueStore

log = structlog.get_logger()

# Module-level singletons (set during startup)
_service: RideService | None = None
_stats: TrackerStats | None = None
_config: AppConfig | None = None


def get_service() -> RideService:
    assert _service is not None, "Tracker not initialized"
    return _service


def get_stats() -> TrackerStats:
    assert _stats is not None, "Tracker not initialized"
    return _stats


def get_config() -> AppConfig:
    assert _config is not None, "Tracker not initialized"
    return _config


def _setup_logging(config: AppConfig) -> None:
    """Configure structlog based on the logging config."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
    )


def build_service(config: AppConfig, stats: TrackerStats) -> RideService:
    """Create the ride service with the configured store backend."""
    if config.storage.backend == "memory":
        store = MemoryKeyValueStore()
    elif config.storage.backend == "file":
        store = FileKeyValueStore(base_dir=config.storage.base_dir)
    else:
        raise ValueError(f"unknown storage backend: {config.storage.backend!r}")

    return RideService(
        sensor=PushSensor(),
        store=store,
        stats=stats,
        max_notifications=config.notifications.max_pending,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    global _service, _stats, _config

    _config = load_config()
    _setup_logging(_config)

    log.info("tracker_starting",
             env=_config.server.env,
             storage_backend=_config.storage.backend,
             storage_dir=_config.storage.base_dir)

    _stats = TrackerStats()
    _service = build_service(_config, _stats)

    log.info("tracker_started",
             host=_config.server.host,
             port=_config.server.port)

    yield

    # Shutdown: detach the sensor. An unfinished ride is not saved.
    _service.session.pause()
    log.info("tracker_stopped", lifecycle=_service.session.lifecycle.value)


app = FastAPI(
    title="RideLog",
    description="Cycling ride tracker",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(ride_router)
app.include_router(sensor_router)
app.include_router(monitoring_router)
