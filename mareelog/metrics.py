"""
Derived Statistics for Telemetry Logs

This module computes the trip summary shown above the charts: path distance,
direct distance between the first and last fix, elapsed duration, and the set
of temperature sensors that reported at least one valid reading.
"""

import numpy as np
from typing import Dict, List, Optional, Sequence
from . import constants
from . import utils
from .settings import SensorConfig
from .telemetry import TelemetryRow, temp_key
from .time_series import parse_timestamp


def great_circle_nm(lat_a: float, lon_a: float, lat_b: float, lon_b: float) -> float:
    """
    Calculate the great-circle distance between two fixes.

    Uses the spherical law of cosines on a sphere of radius EARTH_RADIUS_NM.
    A zero coordinate on either side means "no fix" and yields 0.

    Args:
        lat_a, lon_a: Latitude and longitude of the first fix in degrees.
        lat_b, lon_b: Latitude and longitude of the second fix in degrees.

    Returns:
        Distance in nautical miles.
    """
    if 0 in (lat_a, lon_a, lat_b, lon_b):
        return 0.0

    lat_a_rad, lon_a_rad = np.deg2rad(lat_a), np.deg2rad(lon_a)
    lat_b_rad, lon_b_rad = np.deg2rad(lat_b), np.deg2rad(lon_b)

    cos_angle = (
        np.cos(lat_a_rad) * np.cos(lat_b_rad) * np.cos(lon_b_rad - lon_a_rad)
        + np.sin(lat_a_rad) * np.sin(lat_b_rad)
    )
    angle = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    distance = constants.EARTH_RADIUS_NM * angle

    return 0.0 if np.isnan(distance) else float(distance)


def compute_total_distance(rows: Sequence[TelemetryRow]) -> float:
    """
    Sum the path length over successive valid fixes.

    A row with a zero coordinate has no fix: it adds nothing and the next
    segment is measured from the fix before it. A row with a missing (NaN)
    coordinate still becomes the previous fix, so both segments touching it
    add nothing.

    Args:
        rows: Chronologically sorted rows.

    Returns:
        Total distance in nautical miles, rounded to 3 decimals.
    """
    distance = 0.0
    prev: Optional[TelemetryRow] = None

    for row in rows:
        if constants.NO_FIX_SENTINEL in (row.latitude, row.longitude):
            continue
        if prev is not None:
            distance += great_circle_nm(prev.latitude, prev.longitude, row.latitude, row.longitude)
        prev = row

    return round(distance, 3)


def compute_direct_distance(rows: Sequence[TelemetryRow]) -> float:
    """
    Distance between the first and last valid fix.

    Returns:
        Distance in nautical miles rounded to 3 decimals, or 0 when fewer
        than two rows carry a valid fix.
    """
    fixes = [row for row in rows if row.has_fix]
    if len(fixes) < 2:
        return 0.0

    first, last = fixes[0], fixes[-1]
    return round(great_circle_nm(first.latitude, first.longitude, last.latitude, last.longitude), 3)


def nm_to_km(distance_nm: float) -> float:
    return round(distance_nm * constants.NM_TO_KM, 2)


def format_duration(delta_ms: float) -> str:
    """
    Format a millisecond delta as ``"D Jr, H Hr et M Mn"``.

    Days, hours and minutes come from floor division; leftover seconds are
    dropped.
    """
    total_secs = int(delta_ms // 1000)
    total_mins = total_secs // 60
    total_hours = total_mins // 60
    days = total_hours // 24
    return f"{days} Jr, {total_hours % 24} Hr et {total_mins % 60} Mn"


def timestamped_rows(rows: Sequence[TelemetryRow]) -> List[TelemetryRow]:
    return [row for row in rows if row.has_timestamp]


def compute_duration(rows: Sequence[TelemetryRow]) -> str:
    """
    Elapsed time between the first and last row carrying a date and time.

    Both ends are truncated to the minute before the difference is taken.

    Args:
        rows: Chronologically sorted rows.

    Returns:
        Formatted duration, or "" when there is no timestamped row or either
        end cannot be parsed.
    """
    stamped = timestamped_rows(rows)
    if not stamped:
        return ""

    start = parse_timestamp(stamped[0].date, stamped[0].time_of_day)
    end = parse_timestamp(stamped[-1].date, stamped[-1].time_of_day)
    if start is None or end is None:
        return ""

    start, end = start.replace(second=0), end.replace(second=0)
    return format_duration((end - start).total_seconds() * 1000)


def channel_has_valid(rows: Sequence[TelemetryRow], channel: int) -> bool:
    return any(utils.is_valid_reading(row.temp(channel)) for row in rows)


def sensor_display_name(sensor: SensorConfig, sensor_names: Dict[str, str]) -> str:
    """Configured label, else the header-derived name, else ``TempN``."""
    key = temp_key(sensor.id)
    return sensor.label or sensor_names.get(key) or key


def active_sensors(rows: Sequence[TelemetryRow], sensors: Sequence[SensorConfig],
                   sensor_names: Dict[str, str]) -> List[str]:
    """
    List display names of enabled sensors with at least one valid reading.

    Args:
        rows: Telemetry rows.
        sensors: Sensor configuration, in display order.
        sensor_names: Header-derived names keyed ``TempN``.

    Returns:
        Display names in configuration order.
    """
    names = []
    for sensor in sensors:
        if not sensor.enabled:
            continue
        if not 1 <= sensor.id <= constants.TEMP_CHANNELS:
            continue
        if channel_has_valid(rows, sensor.id):
            names.append(sensor_display_name(sensor, sensor_names))
    return names
