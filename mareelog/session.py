"""
Session Builder for Telemetry Logs

This module orchestrates the complete pipeline for one log file, combining
all processing steps into a single payload for the chart and print layers.
"""

import logging
from typing import Dict, Optional
from . import metrics
from . import pagination
from . import series
from . import time_series
from .codec import Codec, DEFAULT_CODEC
from .data_loading import parse_log_text
from .errors import EmptyInputError
from .settings import ChartSettings, DEFAULT_SETTINGS
from .telemetry import ParsedLog, build_telemetry_records

logger = logging.getLogger(__name__)


def _trip_bounds(parsed: ParsedLog) -> Dict[str, Optional[str]]:
    stamped = metrics.timestamped_rows(parsed.rows)
    if not stamped:
        return {"start_date": None, "end_date": None}

    first, last = stamped[0], stamped[-1]
    return {
        "start_date": f"{first.date} {time_series.normalize_time_with_seconds(first.time_of_day)}",
        "end_date": f"{last.date} {time_series.normalize_time_with_seconds(last.time_of_day)}",
    }


def build_session(text: str, settings: ChartSettings = DEFAULT_SETTINGS,
                  codec: Codec = DEFAULT_CODEC) -> Dict:
    """
    Parse a log and compute everything the chart and print layers need.

    Steps:
    1. Parses the text into rows
    2. Sorts rows chronologically
    3. Computes distance, direct distance, duration and active sensors
    4. Splits rows into overlapping pages

    Args:
        text: Raw log content.
        settings: Chart settings (sensor config, page size, display step).
        codec: Codec for encoded lines.

    Returns:
        Dictionary containing:
        - parsed: ParsedLog with rows sorted
        - pages: list of row pages
        - summary: dict of scalar statistics (see build_summary())

    Raises:
        EmptyInputError: If the text is empty or yields no rows.
        UnrecognizedFormatError: If the header row cannot be located.
    """
    parsed = parse_log_text(text, codec)
    if not parsed.rows:
        raise EmptyInputError("Parsed time-series is empty. Check log file.")

    parsed.rows = time_series.sort_rows(parsed.rows)
    pages = pagination.paginate(parsed.rows, settings.effective_page_size)
    summary = build_summary(parsed, settings)
    summary["pages"] = len(pages)

    logger.info("Session built: %d rows, %d page(s), %.3f nm",
                len(parsed.rows), len(pages), summary["distance_nm"])
    return {"parsed": parsed, "pages": pages, "summary": summary}


def build_summary(parsed: ParsedLog, settings: ChartSettings = DEFAULT_SETTINGS) -> Dict:
    """
    Compute the trip summary for sorted rows.

    Returns:
        Dictionary with row_count, start_date, end_date, duration,
        distance_nm, distance_km, direct_distance_nm, direct_distance_km,
        active_sensors, sensor_count, sensor_names and page_size.
    """
    rows = parsed.rows
    distance = metrics.compute_total_distance(rows)
    direct = metrics.compute_direct_distance(rows)
    active = metrics.active_sensors(rows, settings.sensors, parsed.sensor_names)

    summary = {"row_count": len(rows)}
    summary.update(_trip_bounds(parsed))
    summary.update({
        "duration": metrics.compute_duration(rows),
        "distance_nm": distance,
        "distance_km": metrics.nm_to_km(distance),
        "direct_distance_nm": direct,
        "direct_distance_km": metrics.nm_to_km(direct),
        "active_sensors": active,
        "sensor_count": len(active),
        "sensor_names": dict(parsed.sensor_names),
        "page_size": settings.effective_page_size,
    })
    return summary


def build_session_payload(text: str, settings: ChartSettings = DEFAULT_SETTINGS,
                          codec: Codec = DEFAULT_CODEC) -> Dict:
    """
    Build a JSON-serializable payload: summary, rows and per-page chart series.

    Args:
        text: Raw log content.
        settings: Chart settings.
        codec: Codec for encoded lines.

    Returns:
        Dictionary with summary, rows (record dicts) and charts (one
        build_page_series() result per page).
    """
    session = build_session(text, settings, codec)
    parsed = session["parsed"]
    return {
        "summary": session["summary"],
        "rows": build_telemetry_records(parsed.rows),
        "charts": [
            series.build_page_series(page, settings, parsed.sensor_names)
            for page in session["pages"]
        ],
    }
