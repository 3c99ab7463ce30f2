"""
Data Loading and Parsing for Device Telemetry Logs

This module turns raw log text into telemetry rows. Files may mix plaintext
and encoded lines, so every line is classified on its own and decoded only
when needed. The header row is located once per file and provides the column
map used for named lookups, with fixed legacy positions as fallback.
"""

import logging
import re
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional, Union
from . import constants
from . import utils
from .codec import Codec, DEFAULT_CODEC
from .errors import EmptyInputError, UnrecognizedFormatError
from .telemetry import HeaderInfo, ParsedLog, TelemetryRow, temp_key

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"\d+/\d+/\d+")


def is_plaintext(line: str) -> bool:
    """
    Decide whether a line is already plaintext.

    A line counts as plaintext when it has a comma and a date-like
    ``digits/digits/digits`` substring anywhere in it.

    Args:
        line: Raw line from the log file.

    Returns:
        True if the line should be used as-is, False if it must be decoded.
    """
    return "," in line and _DATE_PATTERN.search(line) is not None


def decode_line(line: str, codec: Codec = DEFAULT_CODEC) -> str:
    if is_plaintext(line):
        return line
    return codec.decode(line)


def split_lines(text: str) -> List[str]:
    """Split raw text on newlines, dropping a trailing carriage return per line."""
    return [line.rstrip("\r") for line in text.split("\n")]


def _looks_like_header(line: str) -> bool:
    return ("SavingID" in line and "Date" in line) or ("Date" in line and "Time" in line)


def locate_header(lines: List[str], codec: Codec = DEFAULT_CODEC) -> HeaderInfo:
    """
    Find the column-header row and build the column map.

    Scans the first HEADER_SCAN_LINES lines, testing each raw line and then its
    decoded form. When nothing matches, the legacy header position
    FALLBACK_HEADER_INDEX is assumed.

    Args:
        lines: All lines of the file.
        codec: Codec used to decode encoded header candidates.

    Returns:
        HeaderInfo with the header index, column map and sensor names.

    Raises:
        UnrecognizedFormatError: If no header was found and the file is too
            short to contain the fallback header row.
    """
    header_index = None
    for i in range(min(len(lines), constants.HEADER_SCAN_LINES)):
        if _looks_like_header(lines[i]) or _looks_like_header(codec.decode(lines[i])):
            header_index = i
            break

    fallback = header_index is None
    if fallback:
        header_index = constants.FALLBACK_HEADER_INDEX
        if header_index >= len(lines):
            raise UnrecognizedFormatError(len(lines), header_index)
        logger.warning("No header row found in first %d lines, using row %d",
                       constants.HEADER_SCAN_LINES, header_index)

    header_line = lines[header_index]
    # Encoded header: no delimiter, or none of the expected keywords
    if "," not in header_line or ("Date" not in header_line and "SavingID" not in header_line):
        header_line = codec.decode(header_line)

    columns = [name.strip() for name in header_line.split(",")]
    column_map = {name: idx for idx, name in enumerate(columns)}

    sensor_names = {}
    for channel in range(1, constants.TEMP_CHANNELS + 1):
        col_idx = constants.FIRST_TEMP_COLUMN - 1 + channel
        if col_idx < len(columns) and columns[col_idx]:
            sensor_names[temp_key(channel)] = columns[col_idx]

    logger.debug("Header row %d (%d columns, fallback=%s)", header_index, len(columns), fallback)
    return HeaderInfo(
        index=header_index,
        column_map=column_map,
        sensor_names=sensor_names,
        fallback=fallback,
    )


def _field(values: List[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(values):
        return None
    return values[index]


def _named(values: List[str], column_map: Dict[str, int], *names: str) -> Optional[str]:
    """First non-empty value among the named columns."""
    for name in names:
        value = _field(values, column_map.get(name))
        if value:
            return value
    return None


def parse_line(line: str, column_map: Dict[str, int], codec: Codec = DEFAULT_CODEC) -> TelemetryRow:
    """
    Parse one data line into a telemetry row.

    Date, time of day and position are looked up by header name, falling back
    to their legacy positions. Temperatures and alarms always come from fixed
    positions. Fields that cannot be read become NaN; the row is never dropped.

    Args:
        line: Raw data line, plaintext or encoded.
        column_map: Header name to column index, from locate_header().
        codec: Codec used when the line is encoded.

    Returns:
        TelemetryRow for the line.
    """
    values = decode_line(line, codec).split(",")
    to_num = utils.parse_float_prefix

    date = _named(values, column_map, "Date") or _field(values, constants.DATE_COLUMN) or ""
    time_of_day = _named(values, column_map, "Time of Day") or _field(values, constants.TIME_COLUMN) or ""

    latitude = to_num(_named(values, column_map, "Latitude", "Lat"))
    longitude = to_num(_named(values, column_map, "Longitude", "Long", "Lng"))

    # Legacy files carry the position at fixed columns
    if utils.is_nan(latitude) and len(values) > constants.LEGACY_LAT_COLUMN:
        latitude = to_num(_field(values, constants.LEGACY_LAT_COLUMN))
        longitude = to_num(_field(values, constants.LEGACY_LON_COLUMN))

    temps = tuple(
        to_num(_field(values, constants.FIRST_TEMP_COLUMN + i))
        for i in range(constants.TEMP_CHANNELS)
    )
    alarms = tuple(
        to_num(_field(values, constants.FIRST_ALARM_COLUMN + i))
        if i < constants.PARSED_ALARM_COLUMNS else np.nan
        for i in range(constants.ALARM_CHANNELS)
    )

    return TelemetryRow(
        date=date,
        time_of_day=time_of_day,
        latitude=latitude,
        longitude=longitude,
        temps=temps,
        alarms=alarms,
    )


def parse_log_text(text: str, codec: Codec = DEFAULT_CODEC) -> ParsedLog:
    """
    Parse the full text of a log file.

    Args:
        text: Raw file content, newline-delimited.
        codec: Codec for encoded lines.

    Returns:
        ParsedLog with rows in file order and header-derived sensor names.

    Raises:
        EmptyInputError: If the text is empty or whitespace-only.
        UnrecognizedFormatError: If the header row cannot be located.
    """
    if not text or not text.strip():
        raise EmptyInputError("Log content is empty.")

    lines = split_lines(text)
    header = locate_header(lines, codec)

    data_lines = [line for line in lines[header.index + 1:] if line.strip()]
    rows = [parse_line(line, header.column_map, codec) for line in data_lines]

    logger.debug("Parsed %d row(s) after header row %d", len(rows), header.index)
    return ParsedLog(rows=rows, sensor_names=dict(header.sensor_names), header=header)


def load_log_file(file_path: Union[str, Path], codec: Codec = DEFAULT_CODEC) -> ParsedLog:
    """
    Read a log file from disk and parse it.

    Args:
        file_path: Path to a device log file (UTF-8 text).
        codec: Codec for encoded lines.

    Returns:
        ParsedLog for the file.
    """
    with Path(file_path).open("r", encoding="utf-8", newline="") as file:
        text = file.read()
    return parse_log_text(text, codec)
