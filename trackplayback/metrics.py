"""
Motion Metrics for Track Playback

This module computes the quantities used to synthesize a point between two
samples: straight-line distance, heading and the interpolated position under
a uniform-motion assumption. Coordinates are treated as planar, with lng as
the x axis and lat as the y axis.
"""

import dataclasses
import numpy as np
from typing import Optional, Tuple
from . import constants
from . import utils
from .track_point import TrackPoint


def planar_delta(p0: TrackPoint, p1: TrackPoint) -> Tuple[float, float]:
    """
    Return the (dx, dy) displacement from p0 to p1 in (lng, lat) space.
    """
    return float(p1.lng - p0.lng), float(p1.lat - p0.lat)


def planar_distance(p0: TrackPoint, p1: TrackPoint) -> float:
    """
    Euclidean distance between two points in (lng, lat) space.

    Args:
        p0: First point.
        p1: Second point.

    Returns:
        Straight-line distance in coordinate units.
    """
    dx, dy = planar_delta(p0, p1)
    return float(np.hypot(dx, dy))


def heading_deg(dx: float, dy: float) -> float:
    """
    Direction of travel for a displacement, clockwise from north.

    North (dy > 0) is 0, east (dx > 0) is 90, south is 180 and west is 270.

    Args:
        dx: Horizontal (lng) displacement.
        dy: Vertical (lat) displacement.

    Returns:
        Heading in degrees normalized to [0, 360).
    """
    heading = float(np.rad2deg(np.arctan2(dx, dy))) % 360.0
    # -0.0 % 360 and tiny negatives can round up to exactly 360
    if heading >= 360.0:
        heading = 0.0
    return heading


def interpolate_radius(p0: TrackPoint, p1: TrackPoint, fraction: float) -> Optional[float]:
    """
    Linearly interpolate the uncertainty radius; None if either end lacks one.
    """
    if p0.radius is None or p1.radius is None:
        return None
    return float(p0.radius + (p1.radius - p0.radius) * fraction)


def interpolate_track_point(p0: TrackPoint, p1: TrackPoint, query_time: float) -> TrackPoint:
    """
    Synthesize the position at query_time between two bracketing samples.

    The object is assumed to move in a straight line at constant speed from
    p0 to p1. When both samples share a position the later sample is returned
    with only its time replaced.

    Args:
        p0: Sample at t0, with t0 <= query_time.
        p1: Sample at t1, with query_time < t1.
        query_time: Time to synthesize.

    Returns:
        A new TrackPoint with is_origin=False, time=query_time, a heading and
        an accuracy label when the radius is known.
    """
    s = planar_distance(p0, p1)
    if s <= 0:
        return dataclasses.replace(p1, time=query_time, info=[dict(e) for e in p1.info])

    elapsed = query_time - p0.time
    duration = p1.time - p0.time
    v = s / duration
    step = v * elapsed

    dx, dy = planar_delta(p0, p1)
    cos_x = dx / s
    sin_x = dy / s

    radius = interpolate_radius(p0, p1, elapsed / duration)
    info = []
    if radius is not None:
        info.append({
            "key": constants.ACCURACY_LABEL,
            "value": utils.format_distance(radius),
        })

    return TrackPoint(
        time=query_time,
        lat=p0.lat + step * sin_x,
        lng=p0.lng + step * cos_x,
        radius=radius,
        dir=heading_deg(dx, dy),
        is_origin=False,
        info=info,
    )
