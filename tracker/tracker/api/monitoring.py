"""Health check and monitoring endpoints."""

from __future__ import annotations

import shutil
from pathlib import Path

from fastapi import APIRouter

router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health() -> dict:
    """Basic health check."""
    from tracker.main import get_config, get_service, get_stats

    config = get_config()
    service = get_service()

    storage_writable = True
    disk_free_gb = -1.0
    if config.storage.backend == "file":
        storage_path = Path(config.storage.base_dir)
        try:
            disk = shutil.disk_usage(storage_path if storage_path.exists() else ".")
            disk_free_gb = round(disk.free / (1024 ** 3), 1)
        except OSError:
            storage_writable = False

    return {
        "status": "ok",
        "version": "0.1.0",
        "uptime_seconds": get_stats().snapshot()["uptime_seconds"],
        "lifecycle": service.session.lifecycle.value,
        "sensor_available": service.sensor.available,
        "storage_backend": config.storage.backend,
        "storage_writable": storage_writable,
        "disk_free_gb": disk_free_gb,
    }


@router.get("/stats")
async def stats() -> dict:
    """Counters over fixes, sensor errors and rides.

    The ``fixes`` section shows how many fixes reached a tracking session
    and how many were dropped for poor accuracy.
    """
    from tracker.main import get_stats

    return get_stats().snapshot()
