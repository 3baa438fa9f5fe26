from __future__ import annotations
from typing import TypedDict, List, Optional
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class MeasurementEvent:
    """
    One per-minute sample decoded from a logger dump.

    Expected:
      - timestamp: naive local wall-clock time, minute resolution
      - voltage (V), current (A), power_factor (cos phi, 0-1)

    active_power (kW) and apparent_power (kVA) are derived on construction.
    """

    timestamp: datetime
    voltage: float
    current: float
    power_factor: float
    active_power: float = field(init=False)
    apparent_power: float = field(init=False)

    def __post_init__(self):
        apparent = self.voltage * self.current / 1000.0
        object.__setattr__(self, "apparent_power", apparent)
        object.__setattr__(
            self,
            "active_power",
            self.voltage * self.current * self.power_factor / 1000.0,
        )


@dataclass(frozen=True)
class PowerStats:
    total_active_power: float  # kWh
    avg_active_power: float  # kW
    max_active_power: MeasurementEvent

    total_apparent_power: float  # kVAh
    avg_apparent_power: float  # kVA
    max_apparent_power: MeasurementEvent

    min_voltage: MeasurementEvent
    max_voltage: MeasurementEvent
    avg_voltage: float  # V

    total_duration: timedelta  # covered interval, one sample included
    count: int


@dataclass(frozen=True)
class DailyStats:
    date: date
    stats: PowerStats


@dataclass(frozen=True)
class OverallStats:
    start: datetime
    end: datetime
    stats: PowerStats
    avg_daily_consumption: Optional[float] = None  # kWh/day

    @property
    def span(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class Blackout:
    start: datetime
    duration: timedelta


@dataclass(frozen=True)
class BlackoutInfo:
    count: int
    total_duration: timedelta
    blackouts: List[Blackout]


## Summary payload (JSON friendly)
class PeakRecord(TypedDict):
    value: float
    time: str


class StatsRecord(TypedDict):
    events: int
    duration_min: int
    total_active_kwh: float
    avg_active_kw: float
    max_active_kw: PeakRecord
    total_apparent_kvah: float
    avg_apparent_kva: float
    max_apparent_kva: PeakRecord
    min_voltage: PeakRecord
    max_voltage: PeakRecord
    avg_voltage: float


class DayRecord(StatsRecord):
    day: str
    coverage_pct: float


class BlackoutRecord(TypedDict):
    start: str
    duration_min: int


class SummaryMeta(TypedDict):
    start: str
    end: str
    events: int
    days: int


class SummaryPayload(TypedDict):
    meta: SummaryMeta
    overall: StatsRecord
    avg_daily_kwh: Optional[float]
    days: List[DayRecord]
    blackouts: List[BlackoutRecord]
    blackout_total_min: int
