"""
Runtime configuration.

Values are read from the environment once at import time.
"""

import os
from pathlib import Path


MAVLINK_DIALECT = os.getenv("FLIGHTLOG_MAVLINK_DIALECT", "common")
CHANNEL_COUNT = int(os.getenv("FLIGHTLOG_CHANNEL_COUNT", "16"))

# Reproduce the raw-fix output that writes latitude into the longitude column
LEGACY_RAW_FIX_LON = os.getenv("FLIGHTLOG_LEGACY_RAW_FIX_LON", "0") not in ("0", "false", "False")

DATA_FOLDER_ENV = "FLIGHTLOG_DATA_FOLDER"
DEFAULT_DATA_FOLDER = Path(os.getenv(DATA_FOLDER_ENV, "./data/logs"))
