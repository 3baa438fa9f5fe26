from __future__ import annotations
from datetime import timedelta
from typing import Optional, Sequence, cast

from . import canon
from .stats import PowerStatistics
from .types import (
    BlackoutInfo,
    DailyStats,
    DayRecord,
    MeasurementEvent,
    OverallStats,
    PeakRecord,
    PowerStats,
    StatsRecord,
    SummaryPayload,
)


def _minutes(duration: timedelta) -> int:
    return int(duration.total_seconds() // 60)


def _peak(value: float, event: MeasurementEvent) -> PeakRecord:
    return {"value": float(value), "time": event.timestamp.strftime(canon.TIMESTAMP_FMT)}


def stats_record(s: PowerStats) -> StatsRecord:
    return {
        "events": s.count,
        "duration_min": _minutes(s.total_duration),
        "total_active_kwh": s.total_active_power,
        "avg_active_kw": s.avg_active_power,
        "max_active_kw": _peak(s.max_active_power.active_power, s.max_active_power),
        "total_apparent_kvah": s.total_apparent_power,
        "avg_apparent_kva": s.avg_apparent_power,
        "max_apparent_kva": _peak(s.max_apparent_power.apparent_power, s.max_apparent_power),
        "min_voltage": _peak(s.min_voltage.voltage, s.min_voltage),
        "max_voltage": _peak(s.max_voltage.voltage, s.max_voltage),
        "avg_voltage": s.avg_voltage,
    }


def summarise(
    events: Sequence[MeasurementEvent],
    *,
    overall: Optional[OverallStats] = None,
    daily: Optional[Sequence[DailyStats]] = None,
    blackouts: Optional[BlackoutInfo] = None,
) -> SummaryPayload:
    """
    JSON-serialisable summary of the overall, daily and blackout views.

    ``events`` must already be prepared (sorted, one per timestamp). Views
    already computed over the same events can be passed in and are reused.
    """
    if overall is None or daily is None or blackouts is None:
        engine = PowerStatistics(events)
        overall = overall if overall is not None else engine.overall_stats()
        daily = daily if daily is not None else engine.daily_stats()
        blackouts = blackouts if blackouts is not None else engine.blackout_stats()

    days: list[DayRecord] = []
    for d in daily:
        record = cast(DayRecord, dict(stats_record(d.stats)))
        record["day"] = d.date.strftime(canon.DATE_FMT)
        record["coverage_pct"] = (
            d.stats.total_duration.total_seconds() * 100.0 / canon.SECONDS_PER_DAY
        )
        days.append(record)

    payload: SummaryPayload = {
        "meta": {
            "start": overall.start.strftime(canon.TIMESTAMP_FMT),
            "end": overall.end.strftime(canon.TIMESTAMP_FMT),
            "events": len(events),
            "days": len(daily),
        },
        "overall": stats_record(overall.stats),
        "avg_daily_kwh": overall.avg_daily_consumption,
        "days": days,
        "blackouts": [
            {"start": b.start.strftime(canon.TIMESTAMP_FMT), "duration_min": _minutes(b.duration)}
            for b in blackouts.blackouts
        ],
        "blackout_total_min": _minutes(blackouts.total_duration),
    }
    return payload
