"""
Exceptions for Track Playback

Only structural violations surface as errors. Out-of-range seeks and speed
changes are clamped by the clock and never raised.

    TrackPlaybackError
    ├── EmptyTrackError
    ├── MalformedPointError
    └── ClockDisposedError
"""


class TrackPlaybackError(Exception):
    """Base class for all track playback errors."""


class EmptyTrackError(TrackPlaybackError, IndexError):
    """Raised when bounds are queried on a track with no points."""

    def __init__(self, operation: str = "query"):
        self.operation = operation
        super().__init__(f"Cannot {operation}: track has no points")


class MalformedPointError(TrackPlaybackError, ValueError):
    """Raised when a sample is missing time/lat/lng or carries invalid values."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class ClockDisposedError(TrackPlaybackError, RuntimeError):
    """Raised when a playback clock is used after dispose()."""

    def __init__(self):
        super().__init__("Playback clock has been disposed")
