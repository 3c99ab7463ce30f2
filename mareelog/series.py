"""
Chart Series Preparation

This module turns one page of rows into the plain data a chart layer draws:
time-thinned points, carry-forward temperature series, constant setpoint
lines and the axis ranges. Nothing here draws; the output is lists and
dictionaries.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence
from . import utils
from .metrics import sensor_display_name
from .settings import ChartSettings
from .telemetry import TelemetryRow, temp_key
from .time_series import parse_timestamp

# Padding added around a setpoint that falls outside the temperature axis
SETPOINT_PADDING = 5.0


def carry_forward(values: Sequence[float]) -> List[Optional[float]]:
    """
    Replace invalid readings with the last valid one.

    NaN and the -127 sentinel count as invalid. Before the first valid
    reading, invalid positions map to None.

    Args:
        values: Readings of one channel in chronological order.

    Returns:
        New list of the same length.
    """
    out: List[Optional[float]] = []
    last_valid: Optional[float] = None

    for value in values:
        if utils.is_valid_reading(value):
            last_valid = value
            out.append(value)
        else:
            out.append(last_valid)

    return out


def channel_series(rows: Sequence[TelemetryRow], channel: int) -> List[Optional[float]]:
    return carry_forward([row.temp(channel) for row in rows])


def thin_by_step(rows: Sequence[TelemetryRow], step_minutes: float) -> List[TelemetryRow]:
    """
    Keep the first row and then each row at least ``step_minutes`` after the
    previously kept one. Rows with an invalid timestamp are dropped after the
    first.
    """
    if not rows:
        return []

    kept = [rows[0]]
    last_time = parse_timestamp(rows[0].date, rows[0].time_of_day)
    step = timedelta(minutes=step_minutes)

    for row in rows[1:]:
        current = parse_timestamp(row.date, row.time_of_day)
        if current is None or last_time is None:
            continue
        if current - last_time >= step:
            kept.append(row)
            last_time = current

    return kept


def drop_consecutive_duplicates(rows: Sequence[TelemetryRow]) -> List[TelemetryRow]:
    """Drop rows whose Date and TimeOfDay repeat those of the previous kept row."""
    unique: List[TelemetryRow] = []
    for row in rows:
        if unique and row.date == unique[-1].date and row.time_of_day == unique[-1].time_of_day:
            continue
        unique.append(row)
    return unique


def axis_range(settings: ChartSettings) -> Dict[str, float]:
    """
    Temperature axis bounds, widened to include configured setpoints.

    Only enabled sensors contribute their setpoints.
    """
    y_min, y_max = settings.temp_min, settings.temp_max

    for sensor in settings.sensors:
        if not sensor.enabled:
            continue
        for setpoint in (sensor.min, sensor.max):
            if setpoint is None:
                continue
            if setpoint < y_min:
                y_min = setpoint - SETPOINT_PADDING
            if setpoint > y_max:
                y_max = setpoint + SETPOINT_PADDING

    return {"min": y_min, "max": y_max}


def _isoformat(instant: Optional[datetime]) -> Optional[str]:
    return instant.isoformat() if instant is not None else None


def build_page_series(page: Sequence[TelemetryRow], settings: ChartSettings,
                      sensor_names: Dict[str, str]) -> Dict:
    """
    Build the chart data for one page.

    Args:
        page: Rows of one page, as produced by paginate().
        settings: Chart settings.
        sensor_names: Header-derived sensor names keyed ``TempN``.

    Returns:
        Dictionary with:
        - x: ISO timestamps of the plotted points (None if unparsable)
        - datasets: list of {label, color, kind, data}, kind being
          "temperature", "min" or "max"
        - x_range: {min, max} ISO bounds, first point + points_per_page minutes
        - y_range: {min, max} temperature axis bounds
    """
    points = drop_consecutive_duplicates(thin_by_step(page, settings.display_step))
    instants = [parse_timestamp(row.date, row.time_of_day) for row in points]

    datasets = []
    for sensor in settings.sensors:
        if not sensor.enabled:
            continue

        name = sensor_display_name(sensor, sensor_names)
        values = channel_series(points, sensor.id)
        if any(v is not None for v in values):
            datasets.append({
                "label": name,
                "color": sensor.color,
                "kind": "temperature",
                "data": [utils.round_float(v, 3) for v in values],
            })

        for kind, setpoint in (("min", sensor.min), ("max", sensor.max)):
            if setpoint is None:
                continue
            datasets.append({
                "label": f"{kind.capitalize()} {name}",
                "color": sensor.color,
                "kind": kind,
                "data": [setpoint] * len(points),
            })

    x_range = {"min": None, "max": None}
    if instants and instants[0] is not None:
        x_range = {
            "min": _isoformat(instants[0]),
            "max": _isoformat(instants[0] + timedelta(minutes=settings.points_per_page)),
        }

    return {
        "x": [_isoformat(instant) for instant in instants],
        "datasets": datasets,
        "x_range": x_range,
        "y_range": axis_range(settings),
    }
