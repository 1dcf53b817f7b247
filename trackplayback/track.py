"""
Time-Indexed Track for Track Playback

This module holds the time-ordered samples of one moving object and answers
the queries a renderer needs while replaying it: bounds, exact lookups and
the visible window up to a given time, with an interpolated tail point.
"""

import logging
import threading
import numpy as np
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from . import metrics
from .errors import EmptyTrackError
from .track_point import TrackPoint, coerce_track_point

logger = logging.getLogger(__name__)

PointLike = Union[TrackPoint, Mapping[str, Any]]


class TimeIndexedTrack:
    """
    Sorted store of track points with a time index.

    Storage is kept sorted ascending by time after every mutation. The index
    maps each distinct time to the latest-inserted point at that time, so
    duplicate timestamps may coexist in storage while only the last write is
    exactly addressable. All mutations and queries are serialized by an
    internal lock.
    """

    def __init__(self, points: Optional[Iterable[PointLike]] = None) -> None:
        self._lock = threading.RLock()
        self._track_points: List[TrackPoint] = []
        self._times = np.empty(0, dtype=np.float64)
        self._time_index: Dict[float, int] = {}
        if points:
            self.add_track_point(list(points))

    def __len__(self) -> int:
        with self._lock:
            return len(self._track_points)

    def is_empty(self) -> bool:
        return len(self) == 0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_track_point(self, track_point: Union[PointLike, Iterable[PointLike]]) -> None:
        """
        Append one point or a sequence of points.

        Every added point is marked as an origin sample. A batch is validated
        as a whole before anything is stored, so a malformed sample leaves the
        track unchanged.

        Args:
            track_point: A TrackPoint, a raw sample mapping, or a sequence of
                either.

        Raises:
            MalformedPointError: If any point lacks a finite time, lat or lng.
        """
        if isinstance(track_point, (TrackPoint, Mapping)):
            batch = [track_point]
        else:
            batch = list(track_point)

        accepted = [coerce_track_point(point) for point in batch]
        if not accepted:
            return
        for point in accepted:
            point.is_origin = True

        with self._lock:
            self._update(self._track_points + accepted)
        logger.debug("Added %d track point(s); track now holds %d", len(accepted), len(self))

    def _update(self, track_points: List[TrackPoint]) -> None:
        # Stable sort keeps insertion order among equal times; state is swapped in only once built
        ordered = sorted(track_points, key=lambda point: point.time)
        times = np.array([point.time for point in ordered], dtype=np.float64)
        time_index = {}
        for i, point in enumerate(ordered):
            time_index[float(point.time)] = i

        self._track_points = ordered
        self._times = times
        self._time_index = time_index

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------

    def get_start_track_point(self) -> TrackPoint:
        """
        Return the earliest point.

        Raises:
            EmptyTrackError: If the track has no points.
        """
        with self._lock:
            if not self._track_points:
                raise EmptyTrackError("get start track point")
            return self._track_points[0]

    def get_end_track_point(self) -> TrackPoint:
        """
        Return the latest point.

        Raises:
            EmptyTrackError: If the track has no points.
        """
        with self._lock:
            if not self._track_points:
                raise EmptyTrackError("get end track point")
            return self._track_points[-1]

    def get_times(self) -> List[float]:
        """
        Return all stored timestamps in ascending order, duplicates included.

        Raises:
            EmptyTrackError: If the track has no points.
        """
        with self._lock:
            if not self._track_points:
                raise EmptyTrackError("get times")
            return self._times.tolist()

    def get_all_track_points(self) -> List[TrackPoint]:
        with self._lock:
            return list(self._track_points)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_track_point_by_time(self, time: float) -> Optional[TrackPoint]:
        """
        Exact lookup through the time index. No interpolation is performed.

        Args:
            time: Timestamp to look up.

        Returns:
            The latest-inserted point at exactly that time, or None.
        """
        with self._lock:
            idx = self._time_index.get(float(time))
            if idx is None:
                return None
            return self._track_points[idx]

    def get_track_point_at_time(self, time: float) -> Optional[TrackPoint]:
        """
        Return the position at time, synthesizing it between samples if needed.

        An exact sample at time is returned unmodified. Times outside the
        track's bounds yield None, as do NaN and an empty track.

        Args:
            time: Timestamp to resolve.

        Returns:
            The exact or interpolated point, or None when time is out of range.
        """
        with self._lock:
            if not self._track_points or np.isnan(time):
                return None

            exact = self.get_track_point_by_time(time)
            if exact is not None:
                return exact

            start_time = self._times[0]
            end_time = self._times[-1]
            if time < start_time or time > end_time:
                return None

            if start_time == end_time:
                return self._track_points[-1]

            # times[left] < time < times[right], both exist since bounds are exact hits
            right = int(np.searchsorted(self._times, time, side="right"))
            left = right - 1
            p0 = self.get_track_point_by_time(self._times[left])
            p1 = self.get_track_point_by_time(self._times[right])
            return metrics.interpolate_track_point(p0, p1, time)

    def get_track_points_before_time(self, time: float) -> List[TrackPoint]:
        """
        Return the visible window of the track at a given time.

        Args:
            time: Query time, usually the playback cursor.

        Returns:
            Every stored point with time strictly less than the query time, in
            ascending order, followed by the point at exactly the query time.
            The tail point is omitted when the query time lies outside the
            track's bounds. A NaN query time precedes nothing and yields an
            empty list.
        """
        with self._lock:
            if np.isnan(time):
                return []
            end = int(np.searchsorted(self._times, time, side="left"))
            points = self._track_points[:end]
            tail = self.get_track_point_at_time(time)
            if tail is not None:
                points.append(tail)
            return points
