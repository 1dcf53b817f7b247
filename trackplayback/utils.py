"""
Utility Functions for Track Playback

This module provides helper functions for numeric conversion, rounding,
distance formatting and date display used throughout the playback system.
"""

import numpy as np
import pandas as pd
from typing import Optional
from . import constants


def safe_float(value) -> float:
    """
    Safely convert a value to float, returning NaN on failure.

    Args:
        value: Value to convert (string, number, etc.).

    Returns:
        Float value, or np.nan if conversion fails.
    """
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


def is_finite(value: float) -> bool:
    """Return True if value is a real number that is neither NaN nor Inf."""
    return bool(np.isfinite(value))


def round_float(value, digits: int = 3) -> Optional[float]:
    """
    Round a float value, handling None, NaN, and Inf.

    Args:
        value: Value to round.
        digits: Number of decimal places. Default 3.

    Returns:
        Rounded float, or None if value is None, NaN, or Inf.
    """
    if value is None or (isinstance(value, float) and (np.isnan(value) or np.isinf(value))):
        return None
    return round(float(value), digits)


def format_distance(distance_m: float) -> str:
    """
    Render a distance in meters below one kilometer, otherwise in kilometers.

    Args:
        distance_m: Distance in meters.

    Returns:
        String such as "12.50 m" or "1.50 km", always with two decimals.
    """
    if distance_m < constants.KILOMETER_THRESHOLD_M:
        return f"{distance_m:.2f} m"
    return f"{distance_m / 1000:.2f} km"


def day_suffix(day: int) -> str:
    """Ordinal suffix for a day of the month: 1st, 2nd, 3rd, 4th, 11th, 22nd."""
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_timestamp(seconds: float) -> Optional[str]:
    """
    Render an epoch time in seconds as a readable UTC date.

    Args:
        seconds: Seconds since the Unix epoch.

    Returns:
        String such as "Sun, 19th Oct 2026 4:30 AM", or None if seconds is
        None, NaN or Inf.
    """
    if seconds is None or not np.isfinite(seconds):
        return None
    stamp = pd.to_datetime(seconds, unit="s", utc=True)
    hour = stamp.hour % 12 or 12
    meridiem = "PM" if stamp.hour >= 12 else "AM"
    return (
        f"{stamp.strftime('%a')}, {stamp.day}{day_suffix(stamp.day)} "
        f"{stamp.strftime('%b')} {stamp.year} {hour}:{stamp.minute:02d} {meridiem}"
    )
