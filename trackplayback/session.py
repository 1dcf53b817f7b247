"""
Playback Session Builder for Track Playback

This module assembles the state of a playback clock and its track into a
single JSON-serializable payload, the shape served by the HTTP API.
"""

from typing import Dict, Iterable, Mapping, Optional
from . import constants
from . import telemetry
from . import utils
from .clock import PlaybackClock
from .track import TimeIndexedTrack


def build_demo_track(samples: Optional[Iterable[Mapping]] = None) -> TimeIndexedTrack:
    """
    Build a track from in-memory samples, defaulting to DEMO_TRACK.

    Args:
        samples: Raw sample mappings. Defaults to constants.DEMO_TRACK.

    Returns:
        A populated TimeIndexedTrack.
    """
    if samples is None:
        samples = constants.DEMO_TRACK
    return TimeIndexedTrack([dict(sample) for sample in samples])


def build_playback_payload(clock: PlaybackClock) -> Dict:
    """
    Build the complete playback state payload.

    Args:
        clock: Clock whose state and visible window are reported.

    Returns:
        Dictionary containing:
        - time: current cursor
        - display_time: cursor rendered as a UTC date string
        - start_time / end_time: track bounds
        - speed: speed multiplier
        - running: whether the clock is advancing
        - progress: fraction of the track replayed, 0-1
        - points: visible window as a list of point dictionaries
    """
    cur_time = clock.get_cur_time()
    start_time = clock.get_start_time()
    end_time = clock.get_end_time()
    duration = end_time - start_time
    progress = (cur_time - start_time) / duration if duration > 0 else 1.0

    return {
        "time": cur_time,
        "display_time": utils.format_timestamp(cur_time),
        "start_time": start_time,
        "end_time": end_time,
        "speed": clock.get_speed(),
        "running": clock.is_running(),
        "progress": utils.round_float(progress, 4),
        "points": [point.to_dict() for point in clock.get_track_points()],
    }


def build_window_geojson(clock: PlaybackClock) -> Dict:
    """GeoJSON FeatureCollection of the clock's visible window."""
    return telemetry.track_points_to_geojson(clock.get_track_points())
