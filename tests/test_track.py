"""
Tests for the time-indexed track store.

Tests cover:
- Sorting and indexing under repeated insertion
- Bounds queries and empty-track failures
- Exact lookup vs. interpolated lookup
- The visible window returned by get_track_points_before_time
- Validation of malformed samples at insert
"""

import math

import pytest

from trackplayback.errors import EmptyTrackError, MalformedPointError
from trackplayback.track import TimeIndexedTrack
from trackplayback.track_point import TrackPoint


# =============================================================
# TEST: Construction and mutation
# =============================================================

class TestMutation:
    """Insertion keeps storage sorted and marks points as origin samples."""

    def test_construct_sorts_and_marks_origin(self):
        track = TimeIndexedTrack([
            TrackPoint(time=5, lat=1, lng=1, is_origin=False),
            TrackPoint(time=1, lat=0, lng=0),
            TrackPoint(time=3, lat=2, lng=2),
        ])

        assert track.get_times() == [1, 3, 5]
        assert all(point.is_origin for point in track.get_all_track_points())

    def test_times_non_decreasing_after_each_mutation(self):
        track = TimeIndexedTrack()
        for t in [7, 2, 9, 2, 0, 5.5, 9, 1]:
            track.add_track_point(TrackPoint(time=t, lat=t, lng=-t))
            times = track.get_times()
            assert times == sorted(times)

    def test_add_accepts_single_point_or_sequence(self):
        track = TimeIndexedTrack()
        track.add_track_point(TrackPoint(time=2, lat=0, lng=0))
        track.add_track_point([
            TrackPoint(time=1, lat=0, lng=0),
            {"time": 3, "lat": 1, "lon": 1},
        ])

        assert track.get_times() == [1, 2, 3]
        assert len(track) == 3

    def test_add_marks_synthesized_points_as_origin(self):
        track = TimeIndexedTrack()
        point = TrackPoint(time=0, lat=0, lng=0, is_origin=False)
        track.add_track_point(point)

        assert point.is_origin is True

    def test_duplicate_times_last_write_wins(self):
        first = TrackPoint(time=4, lat=1, lng=1)
        second = TrackPoint(time=4, lat=2, lng=2)
        track = TimeIndexedTrack([TrackPoint(time=0, lat=0, lng=0), first])
        track.add_track_point(second)

        assert track.get_times() == [0, 4, 4]
        assert track.get_track_point_by_time(4) is second


# =============================================================
# TEST: Bounds
# =============================================================

class TestBounds:
    """Start/end/time-list queries."""

    def test_start_and_end_points(self, straight_track):
        assert straight_track.get_start_track_point().time == 0
        assert straight_track.get_end_track_point().time == 10

    def test_empty_track_start_raises(self):
        with pytest.raises(EmptyTrackError):
            TimeIndexedTrack().get_start_track_point()

    def test_empty_track_end_and_times_raise(self):
        track = TimeIndexedTrack([])
        with pytest.raises(EmptyTrackError):
            track.get_end_track_point()
        with pytest.raises(EmptyTrackError):
            track.get_times()

    def test_empty_track_queries_return_nothing(self):
        track = TimeIndexedTrack()
        assert track.is_empty()
        assert track.get_track_point_by_time(0) is None
        assert track.get_track_point_at_time(0) is None
        assert track.get_track_points_before_time(0) == []


# =============================================================
# TEST: Lookup and interpolation
# =============================================================

class TestLookup:
    """Exact hits vs. synthesized points."""

    def test_exact_lookup_does_not_synthesize(self, straight_track):
        assert straight_track.get_track_point_by_time(5) is None
        assert straight_track.get_track_point_by_time(10).lng == 10

    def test_midpoint_scenario(self, straight_track):
        point = straight_track.get_track_point_at_time(5)

        assert point.time == 5
        assert point.lat == pytest.approx(0)
        assert point.lng == pytest.approx(5)
        assert point.radius == pytest.approx(15)
        assert point.is_origin is False
        assert point.dir == pytest.approx(90)
        assert point.info == [{"key": "Accuracy:", "value": "15.00 m"}]

    def test_exact_hit_returned_unmodified(self):
        middle = TrackPoint(time=5, lat=3, lng=3)
        track = TimeIndexedTrack([
            TrackPoint(time=0, lat=0, lng=0),
            middle,
            TrackPoint(time=10, lat=0, lng=10),
        ])

        assert track.get_track_point_at_time(5) is middle
        assert middle.dir is None
        assert middle.radius is None

    def test_position_on_segment_at_time_fraction(self):
        p0 = TrackPoint(time=2, lat=1, lng=1, radius=0)
        p1 = TrackPoint(time=6, lat=4, lng=5, radius=0)
        track = TimeIndexedTrack([p0, p1])

        for t in [2.5, 3, 4.75, 5.9]:
            point = track.get_track_point_at_time(t)
            s = math.hypot(p1.lng - p0.lng, p1.lat - p0.lat)
            travelled = math.hypot(point.lng - p0.lng, point.lat - p0.lat)
            remaining = math.hypot(p1.lng - point.lng, p1.lat - point.lat)
            assert travelled == pytest.approx((t - 2) / 4 * s)
            assert travelled + remaining == pytest.approx(s)

    def test_brackets_correct_segment(self):
        track = TimeIndexedTrack([
            TrackPoint(time=0, lat=0, lng=0),
            TrackPoint(time=10, lat=10, lng=0),
            TrackPoint(time=20, lat=10, lng=10),
            TrackPoint(time=30, lat=0, lng=10),
        ])

        point = track.get_track_point_at_time(25)
        assert point.lng == pytest.approx(10)
        assert point.lat == pytest.approx(5)
        assert point.dir == pytest.approx(180)

    def test_coincident_points_return_later_point(self):
        p1 = TrackPoint(time=10, lat=2, lng=3, radius=7, dir=45, info=[{"key": "id", "value": "A"}], ts="later")
        track = TimeIndexedTrack([TrackPoint(time=0, lat=2, lng=3, radius=1), p1])

        point = track.get_track_point_at_time(4)

        assert point is not p1
        assert point.time == 4
        assert (point.lat, point.lng, point.radius, point.dir) == (2, 3, 7, 45)
        assert point.info == [{"key": "id", "value": "A"}]
        assert point.ts == "later"
        assert p1.time == 10

    def test_missing_radius_skips_accuracy_label(self):
        track = TimeIndexedTrack([
            TrackPoint(time=0, lat=0, lng=0),
            TrackPoint(time=10, lat=10, lng=0, radius=5),
        ])

        point = track.get_track_point_at_time(5)
        assert point.radius is None
        assert point.info == []
        assert point.dir == pytest.approx(0)

    def test_single_time_returns_sole_point(self):
        only = TrackPoint(time=3, lat=1, lng=1)
        track = TimeIndexedTrack([only])

        assert track.get_track_point_at_time(3) is only
        assert track.get_track_point_at_time(4) is None


# =============================================================
# TEST: Visible window
# =============================================================

class TestPointsBeforeTime:
    """get_track_points_before_time returns history plus a tail point."""

    def test_window_has_history_and_tail(self):
        track = TimeIndexedTrack([
            TrackPoint(time=0, lat=0, lng=0),
            TrackPoint(time=4, lat=0, lng=4),
            TrackPoint(time=8, lat=0, lng=8),
        ])

        points = track.get_track_points_before_time(6)

        assert [p.time for p in points] == [0, 4, 6]
        assert points[-1].is_origin is False
        assert points[-1].lng == pytest.approx(6)

    def test_exact_time_tail_is_stored_point(self):
        end = TrackPoint(time=8, lat=0, lng=8)
        track = TimeIndexedTrack([TrackPoint(time=0, lat=0, lng=0), end])

        points = track.get_track_points_before_time(8)

        assert [p.time for p in points] == [0, 8]
        assert points[-1] is end

    def test_before_start_returns_nothing(self, straight_track):
        assert straight_track.get_track_points_before_time(-1) == []

    def test_after_end_returns_stored_points_without_tail(self, straight_track):
        points = straight_track.get_track_points_before_time(11)

        assert [p.time for p in points] == [0, 10]
        assert all(p.is_origin for p in points)

    def test_window_is_a_copy(self, straight_track):
        points = straight_track.get_track_points_before_time(5)
        points.clear()

        assert len(straight_track) == 2

    def test_nan_time_returns_empty_window(self, straight_track):
        assert straight_track.get_track_points_before_time(math.nan) == []

    def test_nan_time_has_no_position(self, straight_track):
        assert straight_track.get_track_point_at_time(math.nan) is None
        assert TimeIndexedTrack().get_track_point_at_time(math.nan) is None


# =============================================================
# TEST: Validation
# =============================================================

class TestValidation:
    """Malformed samples are rejected at the insert boundary."""

    @pytest.mark.parametrize("sample", [
        {"lat": 0, "lng": 0},
        {"time": 0, "lng": 0},
        {"time": 0, "lat": 0},
        {"time": "soon", "lat": 0, "lng": 0},
        {"time": 0, "lat": float("nan"), "lng": 0},
        {"time": 0, "lat": 0, "lng": 0, "radius": -1},
    ])
    def test_malformed_mapping_rejected(self, sample):
        track = TimeIndexedTrack()
        with pytest.raises(MalformedPointError):
            track.add_track_point(sample)

    def test_malformed_dataclass_rejected(self):
        track = TimeIndexedTrack()
        with pytest.raises(MalformedPointError):
            track.add_track_point(TrackPoint(time=None, lat=0, lng=0))

    def test_string_time_leaves_track_unchanged(self, straight_track):
        with pytest.raises(MalformedPointError):
            straight_track.add_track_point(TrackPoint(time="5", lat=0, lng=5))

        assert len(straight_track) == 2
        assert straight_track.get_times() == [0, 10]
        assert straight_track.get_track_point_at_time(5).lng == pytest.approx(5)

    @pytest.mark.parametrize("fields", [
        {"lat": "0"},
        {"lng": "0"},
        {"radius": "5"},
        {"dir": "90"},
        {"lat": True},
    ])
    def test_non_numeric_dataclass_fields_rejected(self, fields):
        values = {"time": 3, "lat": 0, "lng": 0}
        values.update(fields)
        track = TimeIndexedTrack()

        with pytest.raises(MalformedPointError):
            track.add_track_point(TrackPoint(**values))

        assert track.is_empty()

    def test_numeric_strings_in_mapping_are_converted(self):
        track = TimeIndexedTrack([{"time": "5", "lat": "1.5", "lng": "2"}])

        point = track.get_start_track_point()
        assert point.time == 5.0
        assert point.lat == 1.5

    def test_batch_rejected_as_a_whole(self, straight_track):
        with pytest.raises(MalformedPointError):
            straight_track.add_track_point([
                TrackPoint(time=20, lat=0, lng=20),
                {"time": 30, "lat": 0},
            ])

        assert straight_track.get_times() == [0, 10]

    def test_unsupported_type_rejected(self):
        with pytest.raises(MalformedPointError):
            TimeIndexedTrack().add_track_point([(0, 0, 0)])
