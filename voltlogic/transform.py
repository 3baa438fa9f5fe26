from __future__ import annotations
import pandas as pd
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from . import canon
from .types import DailyStats, MeasurementEvent


def to_frame(events: Sequence[MeasurementEvent], tz: Optional[str] = None) -> pd.DataFrame:
    """
    Tabulate events for charting or export.

    Returns a DataFrame indexed by 'timestamp' with columns:
      voltage, current, power_factor, active_power, apparent_power

    Decoded timestamps are local wall-clock times; pass ``tz`` to localise.
    """
    idx = pd.DatetimeIndex([e.timestamp for e in events], name=canon.INDEX_NAME)
    df = pd.DataFrame(
        {col: [getattr(e, col) for e in events] for col in canon.EVENT_COLS},
        index=idx,
        columns=canon.EVENT_COLS,
    ).astype(float)
    if tz is not None:
        df = df.tz_localize(ZoneInfo(tz), ambiguous="NaT", nonexistent="NaT")
    return df


def daily_frame(daily: Iterable[DailyStats]) -> pd.DataFrame:
    """One row per day with energy totals, averages and extremes."""
    rows = []
    for d in daily:
        s = d.stats
        rows.append(
            {
                "day": pd.Timestamp(d.date),
                "events": s.count,
                "duration_min": int(s.total_duration.total_seconds() // 60),
                "total_active_kwh": s.total_active_power,
                "avg_active_kw": s.avg_active_power,
                "max_active_kw": s.max_active_power.active_power,
                "total_apparent_kvah": s.total_apparent_power,
                "avg_apparent_kva": s.avg_apparent_power,
                "max_apparent_kva": s.max_apparent_power.apparent_power,
                "min_voltage": s.min_voltage.voltage,
                "max_voltage": s.max_voltage.voltage,
                "avg_voltage": s.avg_voltage,
            }
        )
    if not rows:
        return pd.DataFrame(columns=["day"]).set_index("day")
    return pd.DataFrame(rows).set_index("day").sort_index()
