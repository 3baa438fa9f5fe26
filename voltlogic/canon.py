from __future__ import annotations
from typing import Final

# Binary layout of an Energy Logger 4000 dump
MAGIC_HEADER: Final[bytes] = bytes((0xE0, 0xC5, 0xEA))
END_OF_DATA: Final[bytes] = bytes((0xFF, 0xFF, 0xFF, 0xFF))
TIMESTAMP_SIZE: Final[int] = 5  # month, day, year-2000, hour, minute
RECORD_SIZE: Final[int] = 5  # voltage u16 BE, current u16 BE, power factor u8
BASE_YEAR: Final[int] = 2000

VOLTAGE_SCALE: Final[float] = 10.0  # raw -> V
CURRENT_SCALE: Final[float] = 1000.0  # raw -> A
POWER_FACTOR_SCALE: Final[float] = 100.0  # raw -> cos(phi)

# The device samples once per minute
SAMPLE_MINUTES: Final[int] = 1
MINUTES_PER_HOUR: Final[float] = 60.0
SECONDS_PER_DAY: Final[float] = 86400.0

DEFAULT_VOLTAGE_MIN: Final[float] = 150.0
DEFAULT_VOLTAGE_MAX: Final[float] = 250.0

INDEX_NAME: Final[str] = "timestamp"
EVENT_COLS: Final[list[str]] = [
    "voltage",
    "current",
    "power_factor",
    "active_power",
    "apparent_power",
]
CSV_HEADER: Final[list[str]] = [
    "Timestamp",
    "Voltage (V)",
    "Current (A)",
    "cosPHI",
    "Active Power (kW)",
    "Apparent Power (kVA)",
]

TIMESTAMP_FMT: Final[str] = "%Y-%m-%d %H:%M"
DATE_FMT: Final[str] = "%Y-%m-%d"

PARAMETER_HISTORY_FILE_TEXT: Final[str] = "voltcraft_history.txt"
PARAMETER_HISTORY_FILE_CSV: Final[str] = "voltcraft_history.csv"
STATS_FILE_TEXT: Final[str] = "voltcraft_stats.txt"
STATS_FILE_JSON: Final[str] = "voltcraft_stats.json"
