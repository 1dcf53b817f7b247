"""
Track Playback Module

Single import surface for the playback system. Re-exports the track model,
the playback clock, the error types and the DataFrame/GeoJSON helpers from
their individual modules.
"""

# Import constants
from .constants import (
    TICK_INTERVAL_S,
    DEFAULT_SPEED,
    SPEED_FACTOR,
    MIN_SPEED,
    MAX_SPEED,
    ACCURACY_LABEL,
    DEMO_TRACK,
)

# Import errors
from .errors import (
    TrackPlaybackError,
    EmptyTrackError,
    MalformedPointError,
    ClockDisposedError,
)

# Import the point model
from .track_point import (
    TrackPoint,
    validate_track_point,
)

# Import motion metrics
from .metrics import (
    planar_distance,
    heading_deg,
    interpolate_track_point,
)

# Import the track store
from .track import TimeIndexedTrack

# Import the clock
from .clock import (
    PlaybackClock,
    Tick,
)

# Import DataFrame and GeoJSON views
from .telemetry import (
    track_points_to_frame,
    track_points_from_frame,
    track_points_to_geojson,
)

# Import display helpers
from .utils import format_distance, format_timestamp

# Import session builder functions
from .session import (
    build_demo_track,
    build_playback_payload,
    build_window_geojson,
)

__all__ = [
    # Constants
    "TICK_INTERVAL_S",
    "DEFAULT_SPEED",
    "SPEED_FACTOR",
    "MIN_SPEED",
    "MAX_SPEED",
    "ACCURACY_LABEL",
    "DEMO_TRACK",
    # Errors
    "TrackPlaybackError",
    "EmptyTrackError",
    "MalformedPointError",
    "ClockDisposedError",
    # Point model
    "TrackPoint",
    "validate_track_point",
    # Metrics
    "planar_distance",
    "heading_deg",
    "interpolate_track_point",
    # Track
    "TimeIndexedTrack",
    # Clock
    "PlaybackClock",
    "Tick",
    # Views
    "track_points_to_frame",
    "track_points_from_frame",
    "track_points_to_geojson",
    # Session builder
    "build_demo_track",
    "build_playback_payload",
    "build_window_geojson",
    # Display helpers
    "format_distance",
    "format_timestamp",
]
