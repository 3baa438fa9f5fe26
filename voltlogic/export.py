"""Plain-text and CSV reports over decoded events and their statistics."""

from __future__ import annotations

from datetime import datetime, timedelta
from os import PathLike
from pathlib import Path
from typing import Sequence, Union

import numpy as np

from . import canon, transform
from .types import BlackoutInfo, DailyStats, MeasurementEvent, OverallStats

PathArg = Union[str, PathLike]


def format_duration(duration: timedelta) -> str:
    """DDd:HHh:MMm from one day, HHh:MMm from one hour, MMm below that."""
    seconds = int(duration.total_seconds())
    minutes = (seconds // 60) % 60
    hours = (seconds // 3600) % 24
    days = seconds // 86400
    if days > 0:
        return f"{days:02d}d:{hours:02d}h:{minutes:02d}m"
    if hours > 0:
        return f"{hours:02d}h:{minutes:02d}m"
    return f"{minutes:02d}m"


def _plain_float(value: float) -> str:
    """Shortest round-trip digits, positional, no trailing ".0" (230.0 -> "230")."""
    return np.format_float_positional(value, trim="-")


def _stamp(ts: datetime) -> str:
    return ts.strftime(f"[{canon.TIMESTAMP_FMT}]")


def format_event(event: MeasurementEvent) -> str:
    return (
        f"{_stamp(event.timestamp)} U={event.voltage:.1f}V I={event.current:.3f}A "
        f"cosPHI={event.power_factor:.2f} P={event.active_power:.3f}kW "
        f"S={event.apparent_power:.3f}kVA"
    )


def render_parameter_history(events: Sequence[MeasurementEvent]) -> str:
    lines = ["== PARAMETER HISTORY ==", ""]
    lines.extend(format_event(e) for e in events)
    return "\n".join(lines) + "\n"


def save_parameter_history_txt(path: PathArg, events: Sequence[MeasurementEvent]) -> Path:
    out = Path(path)
    out.write_text(render_parameter_history(events), encoding="utf-8")
    return out


def save_parameter_history_csv(path: PathArg, events: Sequence[MeasurementEvent]) -> Path:
    out = Path(path)
    frame = transform.to_frame(events)
    frame.to_csv(
        out,
        header=canon.CSV_HEADER[1:],
        index_label=canon.CSV_HEADER[0],
        date_format=canon.TIMESTAMP_FMT,
        float_format=_plain_float,
        lineterminator="\n",
    )
    return out


def _overall_lines(overall: OverallStats) -> list[str]:
    s = overall.stats
    lines = [
        "==== OVERALL STATISTICS ==================",
        f"Interval: {_stamp(overall.start)}-{_stamp(overall.end)} "
        f"({format_duration(overall.span)})",
    ]
    if overall.avg_daily_consumption is not None:
        d = overall.avg_daily_consumption
        lines.append(
            f"Average consumption: {d:.2f}kWh/day | "
            f"Projected: {d * 30:.2f}kWh/month or {d * 365:.2f}kWh/year."
        )
    lines += [
        "",
        "- ACTIVE POWER",
        f"Total energy consumption: {s.total_active_power:.2f}kWh.",
        f"Peak power was {s.max_active_power.active_power:.2f}kW "
        f"and occurred on {_stamp(s.max_active_power.timestamp)}.",
        f"Minute by minute average power: {s.avg_active_power:.2f}kW.",
        "",
        "- APPARENT POWER",
        f"Total energy consumption: {s.total_apparent_power:.2f}kVAh.",
        f"Peak power was {s.max_apparent_power.apparent_power:.2f}kVA "
        f"and occurred on {_stamp(s.max_apparent_power.timestamp)}.",
        f"Minute by minute average power: {s.avg_apparent_power:.2f}kVA.",
        "",
        "- VOLTAGE",
        f"Minimum voltage was {s.min_voltage.voltage:.1f}V "
        f"and occurred on {_stamp(s.min_voltage.timestamp)}.",
        f"Maximum voltage was {s.max_voltage.voltage:.1f}V "
        f"and occurred on {_stamp(s.max_voltage.timestamp)}.",
        f"Minute by minute average voltage: {s.avg_voltage:.1f}V.",
    ]
    return lines


def _daily_lines(day: DailyStats) -> list[str]:
    s = day.stats
    coverage = s.total_duration.total_seconds() * 100.0 / canon.SECONDS_PER_DAY
    return [
        f"[{day.date.strftime(canon.DATE_FMT)}] - {format_duration(s.total_duration)} "
        f"recorded activity ({coverage:.1f}%)",
        f"      Total active power: {s.total_active_power:.2f}kWh  "
        f"| Average: {s.avg_active_power:.2f}kW  "
        f"| Maximum: {s.max_active_power.active_power:.2f}kW "
        f"on {_stamp(s.max_active_power.timestamp)}",
        f"    Total apparent power: {s.total_apparent_power:.2f}kVAh "
        f"| Average: {s.avg_apparent_power:.2f}kVA "
        f"| Maximum: {s.max_apparent_power.apparent_power:.2f}kVA "
        f"on {_stamp(s.max_apparent_power.timestamp)}",
        f"    Voltage: Average: {s.avg_voltage:.1f}V "
        f"| Minimum: {s.min_voltage.voltage:.1f}V on {_stamp(s.min_voltage.timestamp)} "
        f"| Maximum: {s.max_voltage.voltage:.1f}V on {_stamp(s.max_voltage.timestamp)}",
    ]


def render_statistics(
    overall: OverallStats,
    daily: Sequence[DailyStats],
    blackouts: BlackoutInfo,
) -> str:
    lines = _overall_lines(overall)
    lines += ["", "", "==== DAILY STATISTICS ===================="]
    for day in daily:
        lines += _daily_lines(day)
        lines.append("")

    lines += [
        "",
        "==== BLACKOUT HISTORY ====================",
        f"{blackouts.count} blackout(s) for a total of "
        f"{format_duration(blackouts.total_duration)}.",
        "",
    ]
    lines.extend(
        f"{_stamp(b.start)} Duration: {format_duration(b.duration)}"
        for b in blackouts.blackouts
    )
    return "\n".join(lines) + "\n"


def save_statistics(
    path: PathArg,
    overall: OverallStats,
    daily: Sequence[DailyStats],
    blackouts: BlackoutInfo,
) -> Path:
    out = Path(path)
    out.write_text(render_statistics(overall, daily, blackouts), encoding="utf-8")
    return out
