#!/usr/bin/env python3
"""Decode Energy Logger 4000 dumps from a folder and write history and statistics reports."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from . import canon, exceptions, export, ingest, summary
from .config import AnalyzerConfig, DecodeConfig, ReportConfig
from .logging_config import setup_logging
from .stats import PowerStatistics
from .types import MeasurementEvent

logger = logging.getLogger(__name__)

HELP_ALIASES = ("/?",)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="voltlogic", description=__doc__)
    parser.add_argument("input_dir", nargs="?", type=Path, default=Path("./"), help="Folder holding the logger dumps")
    parser.add_argument("output_dir", nargs="?", type=Path, default=Path("./"), help="Folder receiving the reports")
    parser.add_argument(
        "--voltage-policy",
        choices=["reject", "warn", "ignore"],
        default="warn",
        help="What to do with records outside the plausible voltage window",
    )
    parser.add_argument("--voltage-min", type=float, default=canon.DEFAULT_VOLTAGE_MIN, help="Lower plausible voltage (V)")
    parser.add_argument("--voltage-max", type=float, default=canon.DEFAULT_VOLTAGE_MAX, help="Upper plausible voltage (V)")
    parser.add_argument("--json", action="store_true", help="Also write a JSON statistics summary")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")
    parser.add_argument("--log-json", action="store_true", help="Emit log records as JSON lines")
    return parser


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def write_reports(
    events: list[MeasurementEvent], output_dir: Path, report: ReportConfig
) -> list[Path]:
    """Prepare events and write every configured report; returns the files written."""
    print("Sorting power data and removing duplicates...", end="", flush=True)
    prepared = ingest.prepare(events)
    print(f" Done ({len(events) - len(prepared)} duplicates dropped).")

    engine = PowerStatistics(prepared)
    overall = engine.overall_stats()
    daily = engine.daily_stats()
    blackouts = engine.blackout_stats()

    jobs = [
        ("parameter history to text file", report.history_txt,
         lambda p: export.save_parameter_history_txt(p, prepared)),
        ("parameter history to CSV file", report.history_csv,
         lambda p: export.save_parameter_history_csv(p, prepared)),
        ("statistics to file", report.stats_txt,
         lambda p: export.save_statistics(p, overall, daily, blackouts)),
    ]
    if report.write_json:
        jobs.append(
            ("statistics summary to file", report.stats_json,
             lambda p: p.write_text(
                 json.dumps(
                     summary.summarise(prepared, overall=overall, daily=daily, blackouts=blackouts),
                     indent=2,
                 ),
                 encoding="utf-8",
             )),
        )

    written: list[Path] = []
    for label, name, save in jobs:
        target = output_dir / name
        print(f"Saving {label} {name}...", end="", flush=True)
        try:
            save(target)
        except OSError as exc:
            logger.error("Failed to write %s: %s", target, exc)
            print(" Failed")
            continue
        written.append(target)
        print(" Ok")
    return written


def run(input_dir: Path, output_dir: Path, config: Optional[AnalyzerConfig] = None) -> int:
    cfg = config or AnalyzerConfig()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        print(f"Failed to create folder {output_dir}: {exc}", file=sys.stderr)
        return 1

    print(f"Reading data files from folder '{input_dir}'.")
    print(f"Writing statistics to folder '{output_dir}'.")

    started = time.perf_counter()

    def _progress(path: Path, error) -> None:
        reason = "Ok" if error is None else ingest.failure_reason(error)
        print(f"Processing file: {path}... {reason}")

    try:
        batch = ingest.load_directory(input_dir, config=cfg.decode, progress=_progress)
    except exceptions.FileUnreadable as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if batch.events:
        write_reports(batch.events, output_dir, cfg.report)
    else:
        print("No valid data files found.")

    elapsed = time.perf_counter() - started
    if batch.file_count > 0:
        print(f"Processed {batch.file_count} files in {elapsed:.3f}s.")
    if batch.failures:
        print(f"Skipped {len(batch.failures)} files.")
    print("Finished.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args_in = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    if args_in and args_in[0] in HELP_ALIASES:
        parser.print_help()
        return 0
    args = parser.parse_args(args_in)

    setup_logging(_log_level(args.verbose), json_output=args.log_json)

    try:
        decode_cfg = DecodeConfig(
            voltage_min=args.voltage_min,
            voltage_max=args.voltage_max,
            voltage_policy=args.voltage_policy,
        )
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    config = AnalyzerConfig(decode=decode_cfg, report=ReportConfig(write_json=args.json))
    return run(args.input_dir, args.output_dir, config)


if __name__ == "__main__":
    raise SystemExit(main())
