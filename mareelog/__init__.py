"""
Telemetry log decoding and normalization.

Turns the partially encoded logs exported by the refrigeration/monitoring
unit into sorted telemetry rows, trip statistics and chart-ready pages.
"""

from .codec import Codec, DEFAULT_CODEC, decode_text, encode_text
from .data_loading import is_plaintext, locate_header, parse_line, parse_log_text, load_log_file
from .errors import LogFormatError, EmptyInputError, UnrecognizedFormatError
from .metrics import (
    great_circle_nm,
    compute_total_distance,
    compute_direct_distance,
    compute_duration,
    active_sensors,
)
from .pagination import paginate
from .series import carry_forward, build_page_series
from .session import build_session, build_session_payload
from .settings import ChartSettings, SensorConfig, load_settings
from .telemetry import TelemetryRow, ParsedLog
from .time_series import parse_timestamp, sort_rows

__all__ = [
    # Codec
    "Codec",
    "DEFAULT_CODEC",
    "decode_text",
    "encode_text",
    # Parsing
    "is_plaintext",
    "locate_header",
    "parse_line",
    "parse_log_text",
    "load_log_file",
    # Errors
    "LogFormatError",
    "EmptyInputError",
    "UnrecognizedFormatError",
    # Statistics
    "great_circle_nm",
    "compute_total_distance",
    "compute_direct_distance",
    "compute_duration",
    "active_sensors",
    # Pages and series
    "paginate",
    "carry_forward",
    "build_page_series",
    # Session
    "build_session",
    "build_session_payload",
    # Settings and model
    "ChartSettings",
    "SensorConfig",
    "load_settings",
    "TelemetryRow",
    "ParsedLog",
    "parse_timestamp",
    "sort_rows",
]
