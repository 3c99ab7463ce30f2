"""
Export Functions for Telemetry Logs

This module provides functions to export decoded log content and normalized
rows to text formats (decoded log, CSV) for external analysis or backup.
"""

from typing import Sequence
from .codec import Codec, DEFAULT_CODEC
from .data_loading import decode_line
from .telemetry import TelemetryRow
from .time_series import rows_to_frame


def decode_log_text(text: str, codec: Codec = DEFAULT_CODEC) -> str:
    """
    Decode every encoded line of a raw log, keeping plaintext lines as they are.

    Args:
        text: Raw log content.
        codec: Codec for encoded lines.

    Returns:
        Decoded text with the original line structure.
    """
    return "\n".join(decode_line(line, codec) for line in text.split("\n"))


def export_rows_csv(rows: Sequence[TelemetryRow]) -> str:
    """
    Export rows to CSV text.

    Columns follow rows_to_frame(): timestamp, Date, TimeOfDay, Latitude,
    Longitude, Temp1..Temp12, A1..A12. Missing readings are empty cells.

    Args:
        rows: Telemetry rows, usually sorted.

    Returns:
        CSV string with a header line.
    """
    df = rows_to_frame(list(rows))
    df["timestamp"] = df["timestamp"].dt.strftime("%Y-%m-%dT%H:%M:%S")
    return df.to_csv(index=False, lineterminator="\n")
