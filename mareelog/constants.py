"""
Constants for Telemetry Log Decoding

This module defines sentinel values, geodesic constants, header-scan limits,
legacy column positions and path constants used throughout the pipeline.
"""

import os
from pathlib import Path

# Log files live in a data folder next to the package, unless overridden
DATA_DIR = Path(os.environ.get("MAREELOG_DATA_DIR", Path(__file__).parent.parent / "data"))
SETTINGS_FILE = DATA_DIR / "chart_settings.json"

# Reserved readings
INVALID_TEMP_SENTINEL = -127.0
NO_FIX_SENTINEL = 0.0

# Geodesy
EARTH_RADIUS_NM = 3440.0647948
NM_TO_KM = 1.852

# Channels
TEMP_CHANNELS = 12
ALARM_CHANNELS = 12

# Header location
HEADER_SCAN_LINES = 25
FALLBACK_HEADER_INDEX = 20

# Legacy column layout: 0=SavingID, 1=Date, 2=Time, 3..14=Temp1..12,
# 15..17=A1..A3, 27/28=Latitude/Longitude
DATE_COLUMN = 1
TIME_COLUMN = 2
FIRST_TEMP_COLUMN = 3
FIRST_ALARM_COLUMN = 15
PARSED_ALARM_COLUMNS = 3
LEGACY_LAT_COLUMN = 27
LEGACY_LON_COLUMN = 28

# Codec
TOKEN_LENGTHS = (3, 2)
