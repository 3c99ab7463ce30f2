"""
Utility Functions for Telemetry Log Decoding

This module provides helper functions for permissive numeric coercion,
rounding, and reading validity checks used throughout the pipeline.
"""

import math
import re
import numpy as np
from typing import Optional
from . import constants

# Longest leading decimal literal, the way firmware-emitted numbers are read
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_float_prefix(value: Optional[str]) -> float:
    """
    Convert a raw field to float, accepting trailing garbage.

    Leading whitespace is skipped and the longest numeric prefix is used, so
    ``"12abc"`` reads as 12.0. Missing, empty and whitespace-only fields, and
    fields with no numeric prefix, read as NaN.

    Args:
        value: Raw field text, or None when the column does not exist.

    Returns:
        Parsed float, or np.nan.
    """
    if value is None or not value.strip():
        return np.nan
    match = _NUMERIC_PREFIX.match(value.lstrip())
    if not match:
        return np.nan
    return float(match.group(0).replace("Infinity", "inf"))


def is_nan(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_valid_reading(value: float) -> bool:
    """A temperature reading is valid when it is neither NaN nor the sentinel."""
    return not is_nan(value) and value != constants.INVALID_TEMP_SENTINEL


def is_valid_fix(lat: float, lon: float) -> bool:
    """A fix is valid when both coordinates are present and nonzero."""
    if is_nan(lat) or is_nan(lon):
        return False
    return lat != constants.NO_FIX_SENTINEL and lon != constants.NO_FIX_SENTINEL


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
