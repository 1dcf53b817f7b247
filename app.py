"""
FastAPI Web Application for Track Playback

This module exposes the playback clock and track queries of one in-process
demo track over a REST API, so a browser map can poll the visible window and
drive the transport controls.
"""

import math
import threading
from contextlib import asynccontextmanager
from typing import Dict, Optional
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from trackplayback import playback


# ============================================================================
# CLOCK LIFECYCLE
# ============================================================================

# Active clock, created on first use (key: "clock")
playback_state: Dict[str, playback.PlaybackClock] = {}

# Sync routes run in a threadpool; guards every access to playback_state
playback_state_lock = threading.Lock()


def get_clock() -> playback.PlaybackClock:
    """
    Return the active playback clock, building it over the demo track on first use.

    Returns:
        The shared PlaybackClock instance.
    """
    with playback_state_lock:
        if "clock" not in playback_state:
            playback_state["clock"] = playback.PlaybackClock(playback.build_demo_track())
        return playback_state["clock"]


def reset_clock(clock: Optional[playback.PlaybackClock] = None) -> None:
    """
    Dispose the active clock and optionally install a replacement.

    Args:
        clock: Clock to serve from now on. If None, the next request builds a
            fresh clock over the demo track.
    """
    with playback_state_lock:
        current = playback_state.pop("clock", None)
        if clock is not None:
            playback_state["clock"] = clock
    if current is not None:
        current.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    reset_clock()


# ============================================================================
# APPLICATION SETUP
# ============================================================================

app = FastAPI(lifespan=lifespan)


@app.exception_handler(playback.EmptyTrackError)
def handle_empty_track(request: Request, exc: playback.EmptyTrackError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


# ============================================================================
# API ROUTES - PLAYBACK STATE & TRANSPORT
# ============================================================================

@app.get("/api/playback")
def get_playback():
    """
    Get the current playback state.

    Returns:
        Dictionary with time, start_time, end_time, speed, running, progress
        and the visible window of points.
    """
    return playback.build_playback_payload(get_clock())


@app.post("/api/playback/start")
def start_playback():
    """Start advancing the cursor. Idempotent while running."""
    clock = get_clock()
    clock.start()
    return playback.build_playback_payload(clock)


@app.post("/api/playback/stop")
def stop_playback():
    """Halt advancement. Idempotent while stopped."""
    clock = get_clock()
    clock.stop()
    return playback.build_playback_payload(clock)


@app.post("/api/playback/restart")
def restart_playback():
    """Rewind to the start of the track and run."""
    clock = get_clock()
    clock.restart()
    return playback.build_playback_payload(clock)


@app.post("/api/playback/slower")
def slow_playback():
    """Halve the playback speed, clamped to the minimum speed."""
    clock = get_clock()
    clock.slow_speed()
    return playback.build_playback_payload(clock)


@app.post("/api/playback/faster")
def quick_playback():
    """Double the playback speed, clamped to the maximum speed."""
    clock = get_clock()
    clock.quick_speed()
    return playback.build_playback_payload(clock)


@app.post("/api/playback/seek")
def seek_playback(time: float = Query(..., description="Track time to seek to")):
    """
    Seek the cursor to a track time.

    Out-of-range times are clamped to the track's bounds.

    Args:
        time: Target track time in seconds.

    Returns:
        The playback state after the seek.

    Raises:
        HTTPException: If time is NaN (status 422).
    """
    if math.isnan(time):
        raise HTTPException(status_code=422, detail="Seek time must be a number")
    clock = get_clock()
    clock.set_cursor(time)
    return playback.build_playback_payload(clock)


# ============================================================================
# API ROUTES - TRACK QUERIES
# ============================================================================

@app.get("/api/track/points")
def get_track_points(time: Optional[float] = Query(None, description="Query time; defaults to the cursor")):
    """
    Get the visible window of the track.

    Args:
        time: Optional query time. If not provided, uses the clock's cursor.

    Returns:
        List of point dictionaries: every sample before the time, followed by
        the position at exactly that time when it lies within the track.
    """
    clock = get_clock()
    if time is None:
        points = clock.get_track_points()
    else:
        points = clock.track.get_track_points_before_time(time)
    return [point.to_dict() for point in points]


@app.get("/api/track/point")
def get_track_point(time: float = Query(..., description="Exact sample time")):
    """
    Get the sample stored at exactly the given time.

    Raises:
        HTTPException: If no sample has that time (status 404).
    """
    point = get_clock().track.get_track_point_by_time(time)
    if point is None:
        raise HTTPException(status_code=404, detail=f"No track point at time {time}")
    return point.to_dict()


@app.get("/api/track/geojson")
def get_track_geojson():
    """
    Get the visible window as a GeoJSON FeatureCollection.

    Returns:
        FeatureCollection with the travelled path and the current position.
    """
    return playback.build_window_geojson(get_clock())


# ============================================================================
# RUN INSTRUCTIONS
# ============================================================================
# Run with: uvicorn app:app --reload
