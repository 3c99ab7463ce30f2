"""
Time Series Handling for Telemetry Logs

This module parses the device's date/time fields into instants, orders rows
chronologically, and flattens rows into a pandas DataFrame for export and
API consumption.
"""

import functools
import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional
import numpy as np
import pandas as pd
from . import constants
from .telemetry import TelemetryRow, temp_key, alarm_key

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1)


def _to_int(part: str) -> Optional[int]:
    part = part.strip()
    if not part.isdecimal():
        return None
    return int(part)


def parse_timestamp(date: str, time_of_day: str) -> Optional[datetime]:
    """
    Build an instant from the device's ``dd/mm/yyyy`` and ``HH:mm[:ss]`` fields.

    Two-digit years are read as 20YY. Seconds are optional.

    Args:
        date: Date field, e.g. "12/06/2024" or "12/06/24".
        time_of_day: Time field, e.g. "08:00" or "08:00:30".

    Returns:
        Naive datetime, or None if either field is malformed.
    """
    if not date or not time_of_day:
        return None

    date_parts = date.split("/")
    time_parts = time_of_day.split(":")
    if len(date_parts) != 3 or len(time_parts) < 2:
        return None

    day, month, year = (_to_int(p) for p in date_parts)
    hour, minute = _to_int(time_parts[0]), _to_int(time_parts[1])
    second = _to_int(time_parts[2]) if len(time_parts) > 2 else 0
    if None in (day, month, year, hour, minute, second):
        return None

    if len(date_parts[2].strip()) <= 2:
        year += 2000

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def timestamp_ms(row: TelemetryRow) -> float:
    """Milliseconds since the epoch for a row, or NaN for an invalid instant."""
    instant = parse_timestamp(row.date, row.time_of_day)
    if instant is None:
        return np.nan
    return (instant - _EPOCH) / timedelta(milliseconds=1)


def _compare_ms(a: float, b: float) -> int:
    # An invalid instant compares equal to everything
    if math.isnan(a) or math.isnan(b):
        return 0
    return (a > b) - (a < b)


def sort_rows(rows: List[TelemetryRow]) -> List[TelemetryRow]:
    """
    Order rows chronologically.

    The sort is stable. Rows whose timestamp cannot be parsed compare equal to
    every other row, so their final position depends on the comparisons made
    and is not otherwise defined.

    Args:
        rows: Telemetry rows in file order.

    Returns:
        New list of rows in ascending time order.
    """
    keyed = [(timestamp_ms(row), row) for row in rows]
    invalid = sum(1 for ms, _ in keyed if math.isnan(ms))
    if invalid:
        logger.warning("%d row(s) have an unparsable date/time", invalid)

    keyed.sort(key=functools.cmp_to_key(lambda a, b: _compare_ms(a[0], b[0])))
    return [row for _, row in keyed]


def normalize_time_with_seconds(time_of_day: str) -> str:
    """Pad ``HH:mm`` to ``HH:mm:00`` and cut anything past ``HH:mm:ss``."""
    parts = time_of_day.split(":")
    if len(parts) == 2:
        return f"{parts[0]}:{parts[1]}:00"
    if len(parts) >= 3:
        return f"{parts[0]}:{parts[1]}:{parts[2]}"
    return time_of_day


def rows_to_frame(rows: List[TelemetryRow]) -> pd.DataFrame:
    """
    Flatten telemetry rows into a DataFrame.

    Args:
        rows: Telemetry rows, usually already sorted.

    Returns:
        DataFrame with columns timestamp, Date, TimeOfDay, Latitude,
        Longitude, Temp1..Temp12 and A1..A12. Invalid timestamps are NaT.
    """
    columns = {
        "timestamp": pd.to_datetime(
            [parse_timestamp(row.date, row.time_of_day) for row in rows]
        ),
        "Date": [row.date for row in rows],
        "TimeOfDay": [row.time_of_day for row in rows],
        "Latitude": [row.latitude for row in rows],
        "Longitude": [row.longitude for row in rows],
    }
    for channel in range(1, constants.TEMP_CHANNELS + 1):
        columns[temp_key(channel)] = [row.temp(channel) for row in rows]
    for channel in range(1, constants.ALARM_CHANNELS + 1):
        columns[alarm_key(channel)] = [row.alarm(channel) for row in rows]

    return pd.DataFrame(columns)
