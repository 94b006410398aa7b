#!/usr/bin/env python3
"""RideLog ride simulator.

Rides a synthetic bike around a start point and streams the fixes to a
running tracker, the way the phone app does.

Usage:
    # 10 minute ride around Lyon, one fix per second
    python -m tools.simulator.simulate --server http://localhost:8000 --duration 600

    # Noisy sensor: a third of the fixes have a poor accuracy radius
    python -m tools.simulator.simulate --server http://localhost:8000 --noisy-ratio 0.33

    # Pause for a coffee halfway through
    python -m tools.simulator.simulate --server http://localhost:8000 --pause-at 300 --pause-for 120
"""

from __future__ import annotations

import argparse
import asyncio
import json
import math
import random
import sys
import time
from dataclasses import dataclass

import httpx


@dataclass
class SimRider:
    lat: float
    lon: float
    bearing: float
    speed_mps: float
    fixes_sent: int = 0
    errors_sent: int = 0


def move_rider(rider: SimRider, dt_seconds: float) -> None:
    """Move the rider along its bearing, with gentle random turns."""
    rider.bearing = (rider.bearing + random.uniform(-8, 8)) % 360

    # Cycling pace: 3-12 m/s
    rider.speed_mps = max(3.0, min(12.0, rider.speed_mps + random.uniform(-0.5, 0.5)))

    distance_m = rider.speed_mps * dt_seconds
    bearing_rad = math.radians(rider.bearing)

    # Approximate: 1 degree latitude ≈ 111,000 m
    dlat = (distance_m * math.cos(bearing_rad)) / 111_000
    dlon = (distance_m * math.sin(bearing_rad)) / (111_000 * math.cos(math.radians(rider.lat)))

    rider.lat += dlat
    rider.lon += dlon


def make_fix_payload(rider: SimRider, timestamp_ms: int, noisy_ratio: float,
                     report_speed: bool) -> dict:
    """Create a single fix JSON payload."""
    if random.random() < noisy_ratio:
        accuracy = random.uniform(21.0, 80.0)
    else:
        accuracy = random.uniform(3.0, 15.0)
    return {
        "latitude": round(rider.lat, 7),
        "longitude": round(rider.lon, 7),
        "timestamp": timestamp_ms,
        "accuracy": round(accuracy, 1),
        "speed": round(rider.speed_mps + random.uniform(-0.4, 0.4), 2) if report_speed else None,
    }


async def post_json(client: httpx.AsyncClient, url: str, payload: dict | None = None) -> dict:
    resp = await client.post(url, content=json.dumps(payload or {}),
                             headers={"content-type": "application/json"})
    data = resp.json()
    if resp.status_code >= 400:
        print(f"  {url} -> {resp.status_code}: {data.get('message', data)}")
    return data


async def run_ride(
    client: httpx.AsyncClient,
    server_url: str,
    rider: SimRider,
    duration_seconds: float,
    interval: float,
    noisy_ratio: float,
    error_ratio: float,
    report_speed: bool,
    pause_at: float | None,
    pause_for: float,
    realtime: bool,
) -> dict:
    """Ride for ``duration_seconds`` of simulated time, then stop."""
    api = f"{server_url}/api/v1"
    await post_json(client, f"{api}/ride/start")

    clock_ms = int(time.time() * 1000)
    elapsed = 0.0
    paused = False
    while elapsed < duration_seconds:
        if pause_at is not None and not paused and elapsed >= pause_at:
            await post_json(client, f"{api}/ride/pause")
            print(f"  paused at {elapsed:.0f}s for {pause_for:.0f}s")
            clock_ms += int(pause_for * 1000)
            await post_json(client, f"{api}/ride/resume")
            paused = True

        move_rider(rider, interval)
        clock_ms += int(interval * 1000)
        elapsed += interval

        if random.random() < error_ratio:
            await post_json(client, f"{api}/sensor/errors", {"message": "Timeout expired"})
            rider.errors_sent += 1
            continue

        await post_json(client, f"{api}/sensor/fixes",
                        make_fix_payload(rider, clock_ms, noisy_ratio, report_speed))
        rider.fixes_sent += 1
        if realtime:
            await asyncio.sleep(interval)

    return await post_json(client, f"{api}/ride/stop")


def main() -> None:
    parser = argparse.ArgumentParser(description="RideLog ride simulator")
    parser.add_argument("--server", default="http://localhost:8000", help="Tracker URL")
    parser.add_argument("--duration", type=float, default=600, help="Ride duration in seconds")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between fixes")
    parser.add_argument("--center", default="45.764043,4.835659", help="Start lat,lon")
    parser.add_argument("--noisy-ratio", type=float, default=0.1,
                        help="Share of fixes with accuracy worse than 20 m")
    parser.add_argument("--error-ratio", type=float, default=0.01,
                        help="Share of ticks that report a sensor error instead of a fix")
    parser.add_argument("--no-speed", action="store_true",
                        help="Omit sensor speed so the tracker derives it")
    parser.add_argument("--pause-at", type=float, default=None, help="Pause after N seconds")
    parser.add_argument("--pause-for", type=float, default=60, help="Pause length in seconds")
    parser.add_argument("--realtime", action="store_true", help="Sleep between fixes")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    try:
        center_lat, center_lon = (float(x) for x in args.center.split(","))
    except ValueError:
        print(f"Invalid --center: {args.center!r}", file=sys.stderr)
        sys.exit(2)

    rider = SimRider(lat=center_lat, lon=center_lon,
                     bearing=random.uniform(0, 360), speed_mps=random.uniform(5, 8))

    print(f"Riding {args.duration:.0f}s from {center_lat:.5f},{center_lon:.5f} -> {args.server}")

    async def _run() -> dict:
        async with httpx.AsyncClient(timeout=10.0) as client:
            return await run_ride(
                client, args.server, rider,
                duration_seconds=args.duration,
                interval=args.interval,
                noisy_ratio=args.noisy_ratio,
                error_ratio=args.error_ratio,
                report_speed=not args.no_speed,
                pause_at=args.pause_at,
                pause_for=args.pause_for,
                realtime=args.realtime,
            )

    try:
        result = asyncio.run(_run())
    except httpx.HTTPError as e:
        print(f"Tracker unreachable: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Sent {rider.fixes_sent} fixes, {rider.errors_sent} sensor errors")
    saved = result.get("saved")
    if saved:
        print(f"Saved ride: {saved['distance_km']} km in {saved['duration_minutes']} min, "
              f"avg {saved['average_speed_kmh']} km/h")
    else:
        print(f"Ride not saved: {result.get('message', result)}")


if __name__ == "__main__":
    main()
