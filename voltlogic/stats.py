from __future__ import annotations
from datetime import date, timedelta
from itertools import groupby, pairwise
from typing import Sequence

import numpy as np

from . import canon, exceptions, validate
from .types import (
    Blackout,
    BlackoutInfo,
    DailyStats,
    MeasurementEvent,
    OverallStats,
    PowerStats,
)

SAMPLE_INTERVAL = timedelta(minutes=canon.SAMPLE_MINUTES)
ONE_DAY = timedelta(days=1)


def _last_argmax(values: np.ndarray) -> int:
    """Position of the maximum; the last one wins among ties."""
    return int(len(values) - 1 - np.argmax(values[::-1]))


def _last_argmin(values: np.ndarray) -> int:
    """Position of the minimum; the last one wins among ties."""
    return int(len(values) - 1 - np.argmin(values[::-1]))


def _column(events: Sequence[MeasurementEvent], attr: str) -> np.ndarray:
    return np.fromiter((getattr(e, attr) for e in events), dtype=float, count=len(events))


def compute_stats(events: Sequence[MeasurementEvent]) -> PowerStats:
    """
    Power statistics over the given events.

    Energy totals assume one-minute sampling: kWh = sum(kW) / 60.
    Extremes (max active/apparent power, min/max voltage) pick the last
    event in iteration order when several share the same value.
    """
    exceptions.require(
        len(events) > 0, "Cannot compute statistics over zero events.", exceptions.EmptyInput
    )
    count = len(events)

    active = _column(events, "active_power")
    apparent = _column(events, "apparent_power")
    voltage = _column(events, "voltage")

    active_sum = float(active.sum())
    apparent_sum = float(apparent.sum())

    start = min(e.timestamp for e in events)
    end = max(e.timestamp for e in events)

    return PowerStats(
        total_active_power=active_sum / canon.MINUTES_PER_HOUR,
        avg_active_power=active_sum / count,
        max_active_power=events[_last_argmax(active)],
        total_apparent_power=apparent_sum / canon.MINUTES_PER_HOUR,
        avg_apparent_power=apparent_sum / count,
        max_apparent_power=events[_last_argmax(apparent)],
        min_voltage=events[_last_argmin(voltage)],
        max_voltage=events[_last_argmax(voltage)],
        avg_voltage=float(voltage.sum()) / count,
        total_duration=(end - start) + SAMPLE_INTERVAL,
        count=count,
    )


def compute_blackouts(events: Sequence[MeasurementEvent]) -> list[Blackout]:
    """Gaps longer than one sampling interval between consecutive events."""
    blackouts: list[Blackout] = []
    for prev, curr in pairwise(events):
        gap = curr.timestamp - prev.timestamp
        if gap > SAMPLE_INTERVAL:
            blackouts.append(
                Blackout(start=prev.timestamp + SAMPLE_INTERVAL, duration=gap - SAMPLE_INTERVAL)
            )
    return blackouts


class PowerStatistics:
    """
    Statistics views over a caller-owned event sequence.

    The sequence is referenced, not copied, and must be sorted ascending with
    at most one event per timestamp (see ingest.prepare).
    """

    compute_stats = staticmethod(compute_stats)
    compute_blackouts = staticmethod(compute_blackouts)

    def __init__(self, events: Sequence[MeasurementEvent]):
        validate.assert_chronological(events)
        self.events = events

    def events_by_day(self) -> list[tuple[date, list[MeasurementEvent]]]:
        """Consecutive per-day runs of the sorted events, in one pass."""
        return [
            (day, list(run))
            for day, run in groupby(self.events, key=lambda e: e.timestamp.date())
        ]

    def distinct_days(self) -> list[date]:
        return [day for day, _ in groupby(e.timestamp.date() for e in self.events)]

    def events_on(self, day: date) -> list[MeasurementEvent]:
        return [e for e in self.events if e.timestamp.date() == day]

    def daily_stats(self) -> list[DailyStats]:
        return [
            DailyStats(date=day, stats=compute_stats(run))
            for day, run in self.events_by_day()
        ]

    def overall_stats(self) -> OverallStats:
        stats = compute_stats(self.events)
        start = self.events[0].timestamp
        end = self.events[-1].timestamp
        span = end - start

        avg_daily = None
        # Only meaningful with at least one day worth of data
        if span >= ONE_DAY:
            avg_daily = stats.total_active_power / (span.total_seconds() / canon.SECONDS_PER_DAY)

        return OverallStats(start=start, end=end, stats=stats, avg_daily_consumption=avg_daily)

    def blackout_stats(self) -> BlackoutInfo:
        blackouts = compute_blackouts(self.events)
        total = sum((b.duration for b in blackouts), timedelta(0))
        return BlackoutInfo(count=len(blackouts), total_duration=total, blackouts=blackouts)
