"""Ride lifecycle and history API endpoints.

This is the thin FastAPI adapter over RideService. Core errors are mapped
to HTTP statuses here and nowhere else.
"""

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from tracker.core.errors import (
    InvalidTransition,
    RideTooShort,
    SensorUnsupported,
    StoreFailure,
    TrackerError,
)
from tracker.core.models import RideRecord, SessionSnapshot
from tracker.storage.rides import fix_to_dict

router = APIRouter(prefix="/api/v1")

_ERROR_STATUS: dict[type[TrackerError], int] = {
    SensorUnsupported: 503,
    RideTooShort: 422,
    InvalidTransition: 409,
    StoreFailure: 500,
}


def _error_response(exc: TrackerError) -> JSONResponse:
    status = _ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(
        content={"ok": False, "error": type(exc).__name__, "message": str(exc)},
        status_code=status,
    )


def _snapshot_to_dict(snap: SessionSnapshot) -> dict:
    last = snap.positions[-1] if snap.positions else None
    return {
        "lifecycle": snap.lifecycle.value,
        "distance_km": round(snap.distance_km, 3),
        "current_speed_kmh": round(snap.current_speed_kmh, 1),
        "fix_count": snap.fix_count,
        "last_position": fix_to_dict(last) if last is not None else None,
        "speed_window": [round(s, 2) for s in snap.speed_window],
    }


def _ride_summary(record: RideRecord) -> dict:
    return {
        "started_at": record.started_at,
        "distance_km": round(record.distance_km, 2),
        "average_speed_kmh": round(record.average_speed_kmh, 1),
        "duration_seconds": record.duration_seconds,
        "duration_minutes": record.duration_minutes,
        "fix_count": len(record.positions),
    }


def _state_response() -> JSONResponse:
    from tracker.main import get_service

    snap = get_service().session.snapshot()
    return JSONResponse(content={"ok": True, "ride": _snapshot_to_dict(snap)})


@router.get("/ride")
async def get_ride() -> JSONResponse:
    """Current readout plus any sensor notifications not yet shown."""
    from tracker.main import get_service

    service = get_service()
    notifications = [
        {"kind": n.kind, "message": n.message, "at_ms": n.at_ms}
        for n in service.drain_notifications()
    ]
    return JSONResponse(content={
        "ride": _snapshot_to_dict(service.session.snapshot()),
        "notifications": notifications,
    })


@router.post("/ride/start")
async def start_ride() -> JSONResponse:
    from tracker.main import get_service

    try:
        get_service().session.start()
    except TrackerError as e:
        return _error_response(e)
    return _state_response()


@router.post("/ride/resume")
async def resume_ride() -> JSONResponse:
    from tracker.main import get_service

    try:
        get_service().session.resume()
    except TrackerError as e:
        return _error_response(e)
    return _state_response()


@router.post("/ride/pause")
async def pause_ride() -> JSONResponse:
    from tracker.main import get_service

    get_service().session.pause()
    return _state_response()


@router.post("/ride/stop")
async def stop_ride() -> JSONResponse:
    """Finish the ride and save it. Returns the saved ride summary."""
    from tracker.main import get_service

    try:
        record = get_service().session.stop()
    except TrackerError as e:
        return _error_response(e)
    return JSONResponse(content={"ok": True, "saved": _ride_summary(record)})


@router.post("/ride/discard")
async def discard_ride() -> JSONResponse:
    from tracker.main import get_service

    get_service().session.discard()
    return _state_response()


@router.get("/rides")
async def list_rides(
    limit: int = Query(default=50, ge=1, le=1000),
) -> JSONResponse:
    """Saved rides, most recent first."""
    from tracker.main import get_service

    try:
        rides = get_service().history()
    except StoreFailure as e:
        return _error_response(e)

    summaries = [_ride_summary(r) for r in rides[:limit]]
    return JSONResponse(content={"rides": summaries, "total": len(rides)})
