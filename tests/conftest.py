"""Shared fixtures for the playback tests."""

import pytest

from trackplayback.track import TimeIndexedTrack
from trackplayback.track_point import TrackPoint


class FakeTimeSource:
    """Manually advanced replacement for time.perf_counter."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_time():
    return FakeTimeSource()


@pytest.fixture
def straight_track():
    """Two samples moving east 10 units over 10 seconds."""
    return TimeIndexedTrack([
        TrackPoint(time=0, lat=0, lng=0, radius=10),
        TrackPoint(time=10, lat=0, lng=10, radius=20),
    ])


@pytest.fixture
def tick_log():
    """List collecting ticks, usable directly as a subscriber."""
    class TickLog(list):
        def __call__(self, tick):
            self.append(tick)

        @property
        def times(self):
            return [tick.time for tick in self]

    return TickLog()
