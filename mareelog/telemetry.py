"""
Telemetry Data Model

This module defines the row type produced by the record parser, the parsed
file result, and conversion of rows into JSON-friendly record dictionaries
for API responses and exports.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from . import constants
from . import utils


def temp_key(channel: int) -> str:
    return f"Temp{channel}"


def alarm_key(channel: int) -> str:
    return f"A{channel}"


@dataclass(frozen=True)
class TelemetryRow:
    """
    One timestamped sample from the device.

    Attributes:
        date: Calendar date as written by the device, ``dd/mm/yyyy``.
        time_of_day: Time as written by the device, ``HH:mm[:ss]``.
        latitude: Degrees; 0 means no fix, NaN means missing.
        longitude: Degrees; 0 means no fix, NaN means missing.
        temps: Temperature channels 1..12 in °C; -127 means sensor absent.
        alarms: Alarm/setpoint flag channels 1..12.
    """
    date: str
    time_of_day: str
    latitude: float
    longitude: float
    temps: Tuple[float, ...]
    alarms: Tuple[float, ...]

    def temp(self, channel: int) -> float:
        """Reading of temperature channel ``channel`` (1-based)."""
        return self.temps[channel - 1]

    def alarm(self, channel: int) -> float:
        return self.alarms[channel - 1]

    @property
    def has_timestamp(self) -> bool:
        return bool(self.date) and bool(self.time_of_day)

    @property
    def has_fix(self) -> bool:
        return utils.is_valid_fix(self.latitude, self.longitude)


@dataclass(frozen=True)
class HeaderInfo:
    """Located header row: its index, column map and sensor display names."""
    index: int
    column_map: Dict[str, int]
    sensor_names: Dict[str, str]
    fallback: bool = False


@dataclass
class ParsedLog:
    """
    Result of parsing one log file.

    Attributes:
        rows: Telemetry rows, in file order until sorted.
        sensor_names: Channel key (``Temp1``..``Temp12``) to header-derived name.
        header: The located header, kept for diagnostics.
    """
    rows: List[TelemetryRow]
    sensor_names: Dict[str, str] = field(default_factory=dict)
    header: Optional[HeaderInfo] = None


def row_to_record(row: TelemetryRow) -> Dict:
    """
    Convert a row to a flat record dictionary.

    NaN readings become None so the record serializes to valid JSON.

    Args:
        row: Telemetry row.

    Returns:
        Dictionary with Date, TimeOfDay, Latitude, Longitude, Temp1..Temp12
        and A1..A12 keys.
    """
    record = {
        "Date": row.date,
        "TimeOfDay": row.time_of_day,
        "Latitude": utils.round_float(row.latitude, 6),
        "Longitude": utils.round_float(row.longitude, 6),
    }
    for channel in range(1, constants.TEMP_CHANNELS + 1):
        record[temp_key(channel)] = utils.round_float(row.temp(channel), 3)
    for channel in range(1, constants.ALARM_CHANNELS + 1):
        record[alarm_key(channel)] = utils.round_float(row.alarm(channel), 3)
    return record


def build_telemetry_records(rows: List[TelemetryRow]) -> List[Dict]:
    return [row_to_record(row) for row in rows]
