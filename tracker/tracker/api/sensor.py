"""Sensor feed API endpoints.

The phone posts the fixes and failures its location service reports; they
are pushed into the in-process sensor in the order received.
"""

from __future__ import annotations

import json
import math

from fastapi import APIRouter, Request, Response

from tracker.core.models import Fix

router = APIRouter(prefix="/api/v1")


def _finite(data: dict, key: str) -> float:
    value = float(data[key])
    if not math.isfinite(value):
        raise ValueError(f"{key} must be a finite number")
    return value


def _parse_json_fix(data: dict) -> Fix:
    """Parse a fix. Raises KeyError/TypeError/ValueError/OverflowError on bad input."""
    if not isinstance(data, dict):
        raise TypeError("each fix must be a JSON object")

    latitude = _finite(data, "latitude")
    longitude = _finite(data, "longitude")
    if not -90.0 <= latitude <= 90.0:
        raise ValueError("latitude out of range")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError("longitude out of range")

    return Fix(
        latitude=latitude,
        longitude=longitude,
        timestamp_ms=int(data["timestamp"]),
        accuracy_m=_finite(data, "accuracy"),
        reported_speed_mps=None if data.get("speed") is None else _finite(data, "speed"),
    )


def _json_response(content: dict, status_code: int = 200) -> Response:
    return Response(
        content=json.dumps(content),
        status_code=status_code,
        media_type="application/json",
    )


async def _read_json(request: Request) -> dict | list | None:
    try:
        return json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


@router.post("/sensor/fixes")
async def receive_fixes(request: Request) -> Response:
    """Receive fixes from the phone.

    Accepts either a single fix object or {"fixes": [...]}.
    """
    from tracker.main import get_service

    body = await _read_json(request)
    if not isinstance(body, dict):
        return _json_response({"accepted": False, "error": "invalid JSON"}, 400)

    raw_fixes = body["fixes"] if "fixes" in body else [body]
    if not isinstance(raw_fixes, list):
        return _json_response({"accepted": False, "error": "fixes must be a list"}, 400)
    try:
        fixes = [_parse_json_fix(f) for f in raw_fixes]
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        return _json_response({"accepted": False, "error": f"invalid fix: {e}"}, 400)

    delivered = get_service().push_fixes(fixes)
    return _json_response({"accepted": True, "received": len(fixes), "delivered": delivered})


@router.post("/sensor/errors")
async def receive_sensor_error(request: Request) -> Response:
    """Receive a location failure (timeout, permission revoked, unavailable)."""
    from tracker.main import get_service

    body = await _read_json(request)
    if not isinstance(body, dict) or not body.get("message"):
        return _json_response({"accepted": False, "error": "message is required"}, 400)

    delivered = get_service().push_error(str(body["message"]))
    return _json_response({"accepted": True, "delivered": delivered})
