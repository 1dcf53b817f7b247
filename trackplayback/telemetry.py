"""
Tabular and GeoJSON Views for Track Playback

This module converts query results into formats that analysis code and
renderers consume directly: pandas DataFrames and GeoJSON feature
collections. It also builds track points from a DataFrame of raw samples.
"""

import logging
import numpy as np
import pandas as pd
from typing import Dict, List, Sequence
from . import utils
from .errors import MalformedPointError
from .track_point import TrackPoint

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["time", "lat", "lng", "radius", "dir", "is_origin", "ts", "info"]


def track_points_to_frame(points: Sequence[TrackPoint]) -> pd.DataFrame:
    """
    Convert track points to a DataFrame, one row per point.

    Args:
        points: Points as returned by a track query.

    Returns:
        DataFrame with columns time, lat, lng, radius, dir, is_origin, ts and
        info. Missing radius/dir values become NaN.
    """
    rows = []
    for point in points:
        rows.append({
            "time": point.time,
            "lat": point.lat,
            "lng": point.lng,
            "radius": np.nan if point.radius is None else point.radius,
            "dir": np.nan if point.dir is None else point.dir,
            "is_origin": point.is_origin,
            "ts": point.ts,
            "info": [dict(entry) for entry in point.info],
        })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _optional(value):
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    return value


def track_points_from_frame(df: pd.DataFrame, drop_invalid: bool = False) -> List[TrackPoint]:
    """
    Build track points from a DataFrame of raw samples.

    Requires time and lat columns plus either lng or lon. Optional columns
    radius, dir and ts are carried over when present.

    Args:
        df: DataFrame with one sample per row.
        drop_invalid: If True, malformed rows are logged and skipped instead of
            raising.

    Returns:
        List of validated TrackPoint objects in row order.

    Raises:
        MalformedPointError: If a required column is missing, or a row is
            malformed and drop_invalid is False.
    """
    lng_column = "lng" if "lng" in df.columns else "lon"
    for column in ("time", "lat", lng_column):
        if column not in df.columns:
            raise MalformedPointError(f"DataFrame is missing column '{column}'", field=column)

    points = []
    for row in df.itertuples(index=False):
        sample = {
            "time": _optional(row.time),
            "lat": _optional(row.lat),
            "lng": _optional(getattr(row, lng_column)),
            "radius": _optional(getattr(row, "radius", None)),
            "dir": _optional(getattr(row, "dir", None)),
            "ts": _optional(getattr(row, "ts", None)),
        }
        try:
            points.append(TrackPoint.from_dict(sample))
        except MalformedPointError as exc:
            if not drop_invalid:
                raise
            logger.warning("Skipping malformed sample at time %r: %s", sample["time"], exc)

    return points


def track_points_to_geojson(points: Sequence[TrackPoint]) -> Dict:
    """
    Convert a visible track window to a GeoJSON FeatureCollection.

    Creates a LineString feature for the travelled path (when it has at least
    two positions) and a Point feature for the current position, which is the
    last point of the window.

    Args:
        points: Points as returned by get_track_points_before_time().

    Returns:
        GeoJSON FeatureCollection.

    Raises:
        ValueError: If points is empty.
    """
    if not points:
        raise ValueError("No track points to convert.")

    coordinates = [[point.lng, point.lat] for point in points]
    features = []

    if len(coordinates) > 1:
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": coordinates,
            },
            "properties": {
                "sampleCount": len(coordinates),
                "startTime": points[0].time,
                "endTime": points[-1].time,
            },
        })

    current = points[-1]
    features.append({
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": coordinates[-1],
        },
        "properties": {
            "marker": "current_position",
            "time": current.time,
            "dir": utils.round_float(current.dir, 2),
            "radius": utils.round_float(current.radius, 2),
            "isOrigin": current.is_origin,
            "info": [dict(entry) for entry in current.info],
            "ts": current.ts,
        },
    })

    return {
        "type": "FeatureCollection",
        "features": features,
    }
