"""
Track Point Model for Track Playback

This module defines the TrackPoint record shared by the track store, the
interpolation routine and every consumer of query results, together with the
validation applied when samples enter a track.
"""

import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union
from . import utils
from .errors import MalformedPointError


@dataclass
class TrackPoint:
    """
    A sampled or synthesized position of the tracked object.

    Attributes:
        time: Timestamp in seconds.
        lat: Planar y coordinate.
        lng: Planar x coordinate.
        radius: Optional non-negative position uncertainty in meters.
        dir: Optional heading in degrees, clockwise from north, in [0, 360).
        is_origin: True for directly sampled points, False for synthesized ones.
        info: Ordered list of {"key": ..., "value": ...} display labels.
        ts: Optional display string.
    """

    time: float
    lat: float
    lng: float
    radius: Optional[float] = None
    dir: Optional[float] = None
    is_origin: bool = True
    info: List[Dict[str, str]] = field(default_factory=list)
    ts: Optional[str] = None

    @classmethod
    def from_dict(cls, sample: Mapping[str, Any]) -> "TrackPoint":
        """
        Build a point from a raw sample mapping.

        Accepts "lon" as an alias of "lng" and "isOrigin" as an alias of
        "is_origin". The result is validated before it is returned.

        Args:
            sample: Mapping with at least time, lat and lng.

        Returns:
            A validated TrackPoint.

        Raises:
            MalformedPointError: If a required field is missing or invalid.
        """
        for name in ("time", "lat"):
            if sample.get(name) is None:
                raise MalformedPointError(f"Track point is missing '{name}'", field=name)
        lng = sample.get("lng", sample.get("lon"))
        if lng is None:
            raise MalformedPointError("Track point is missing 'lng'", field="lng")

        radius = sample.get("radius")
        heading = sample.get("dir")
        point = cls(
            time=utils.safe_float(sample["time"]),
            lat=utils.safe_float(sample["lat"]),
            lng=utils.safe_float(lng),
            radius=None if radius is None else utils.safe_float(radius),
            dir=None if heading is None else utils.safe_float(heading),
            is_origin=bool(sample.get("is_origin", sample.get("isOrigin", True))),
            info=[dict(entry) for entry in sample.get("info") or []],
            ts=sample.get("ts"),
        )
        validate_track_point(point)
        return point

    def to_dict(self) -> Dict[str, Any]:
        """Return the point as a plain mapping, using renderer-facing key names."""
        return {
            "time": self.time,
            "lat": self.lat,
            "lng": self.lng,
            "radius": self.radius,
            "dir": self.dir,
            "isOrigin": self.is_origin,
            "info": [dict(entry) for entry in self.info],
            "ts": self.ts,
        }


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_track_point(point: TrackPoint) -> None:
    """
    Reject points whose geometry cannot be placed on the timeline.

    Numeric fields must hold real numbers, not strings that merely parse as
    numbers, so stored points always sort and interpolate.

    Args:
        point: Point about to be stored.

    Raises:
        MalformedPointError: If time, lat or lng is missing or not a finite
            number, if radius is negative or not finite, or if dir is not a
            finite number.
    """
    for name in ("time", "lat", "lng"):
        value = getattr(point, name)
        if value is None:
            raise MalformedPointError(f"Track point is missing '{name}'", field=name)
        if not _is_real(value) or not utils.is_finite(value):
            raise MalformedPointError(
                f"Track point '{name}' must be a finite number, got {value!r}", field=name
            )

    if point.radius is not None:
        if not _is_real(point.radius) or not utils.is_finite(point.radius) or point.radius < 0:
            raise MalformedPointError(
                f"Track point radius must be a non-negative number, got {point.radius!r}",
                field="radius",
            )

    if point.dir is not None and (not _is_real(point.dir) or not utils.is_finite(point.dir)):
        raise MalformedPointError(
            f"Track point dir must be a finite number, got {point.dir!r}", field="dir"
        )


def coerce_track_point(point: Union[TrackPoint, Mapping[str, Any]]) -> TrackPoint:
    """
    Accept either a TrackPoint or a raw sample mapping and return a validated point.

    Raises:
        MalformedPointError: If the point is invalid or of an unsupported type.
    """
    if isinstance(point, TrackPoint):
        validate_track_point(point)
        return point
    if isinstance(point, Mapping):
        return TrackPoint.from_dict(point)
    raise MalformedPointError(
        f"Expected a TrackPoint or mapping, got {type(point).__name__}"
    )
