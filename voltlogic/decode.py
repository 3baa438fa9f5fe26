"""Decoder for Energy Logger 4000 binary dumps.

A dump is one or more data blocks followed by an end-of-data marker::

    E0 C5 EA | MM DD YY hh mm | record | record | ... [E0 C5 EA ...] FF FF FF FF

Each block header carries the timestamp of its first record; subsequent
records are one minute apart. Records are 5 bytes: voltage (u16 BE, 1/10 V),
current (u16 BE, 1/1000 A) and power factor (u8, 1/100).
"""

from __future__ import annotations

import logging
import struct
from datetime import datetime, timedelta
from os import PathLike
from pathlib import Path
from typing import Optional, Union

from . import canon, exceptions, validate
from .config import DecodeConfig
from .types import MeasurementEvent

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray]

_TIMESTAMP = struct.Struct(">5B")
_RECORD = struct.Struct(">HHB")


def _is_datablock(raw: Buffer, offset: int) -> bool:
    return raw.startswith(canon.MAGIC_HEADER, offset)


def _is_endofdata(raw: Buffer, offset: int) -> bool:
    return raw.startswith(canon.END_OF_DATA, offset)


def _require_bytes(raw: Buffer, offset: int, size: int, what: str) -> None:
    if offset + size > len(raw):
        raise exceptions.Truncated(
            f"Buffer ends at byte {len(raw)} inside {what} at offset {offset}; "
            "end-of-data marker not found",
            offset=offset,
        )


def decode_timestamp(raw: Buffer, offset: int) -> datetime:
    """Decode the 5-byte block start timestamp at ``offset``."""
    _require_bytes(raw, offset, canon.TIMESTAMP_SIZE, "block timestamp")
    month, day, year, hour, minute = _TIMESTAMP.unpack_from(raw, offset)
    try:
        return datetime(canon.BASE_YEAR + year, month, day, hour, minute)
    except ValueError as exc:
        raise exceptions.InvalidFormat(
            f"Invalid block timestamp at offset {offset}: "
            f"{month:02d}/{day:02d}/{year:02d} {hour:02d}:{minute:02d}"
        ) from exc


def decode_record(raw: Buffer, offset: int) -> tuple[float, float, float]:
    """Decode one measurement record into (volts, amps, cos phi)."""
    _require_bytes(raw, offset, canon.RECORD_SIZE, "measurement record")
    voltage, current, power_factor = _RECORD.unpack_from(raw, offset)
    return (
        voltage / canon.VOLTAGE_SCALE,
        current / canon.CURRENT_SCALE,
        power_factor / canon.POWER_FACTOR_SCALE,
    )


def parse(raw: Buffer, *, config: Optional[DecodeConfig] = None) -> list[MeasurementEvent]:
    """
    Decode a complete dump into measurement events, in file order.

    Raises:
      - InvalidFormat: the buffer does not start with a block header, or a
        block timestamp is not a valid date
      - Truncated: the buffer ends before the end-of-data marker
      - VoltageOutOfRange: only under the 'reject' voltage policy
    """
    cfg = config or DecodeConfig()
    raw = raw if isinstance(raw, (bytes, bytearray)) else bytes(raw)

    if not _is_datablock(raw, 0):
        raise exceptions.InvalidFormat(
            "Invalid data file, probably not an Energy Logger 4000 dump"
        )

    events: list[MeasurementEvent] = []
    implausible = 0
    first_implausible: Optional[tuple[float, int]] = None
    offset = 0
    # Overwritten by the header at offset 0
    start_time = datetime(canon.BASE_YEAR, 1, 1)
    minute_increment = 0

    while True:
        if _is_datablock(raw, offset):
            start_time = decode_timestamp(raw, offset + len(canon.MAGIC_HEADER))
            logger.debug("Data block at offset %d starts %s", offset, start_time)
            minute_increment = 0
            offset += len(canon.MAGIC_HEADER) + canon.TIMESTAMP_SIZE
            continue
        if _is_endofdata(raw, offset):
            break

        voltage, current, power_factor = decode_record(raw, offset)
        if not validate.check_voltage(voltage, offset, cfg):
            implausible += 1
            if first_implausible is None:
                first_implausible = (voltage, offset)
        events.append(
            MeasurementEvent(
                timestamp=start_time + timedelta(minutes=minute_increment),
                voltage=voltage,
                current=current,
                power_factor=power_factor,
            )
        )
        minute_increment += canon.SAMPLE_MINUTES
        offset += canon.RECORD_SIZE

    if first_implausible is not None:
        logger.warning(
            "%d record(s) outside the plausible voltage window (%.1fV, %.1fV); "
            "first %.1fV at offset %d",
            implausible,
            cfg.voltage_min,
            cfg.voltage_max,
            *first_implausible,
        )
    return events


class Decoder:
    """Holds one fully loaded dump and decodes it on demand."""

    def __init__(self, raw: Buffer, *, config: Optional[DecodeConfig] = None):
        self.raw = raw
        self.config = config or DecodeConfig()

    @classmethod
    def from_file(
        cls, path: Union[str, PathLike], *, config: Optional[DecodeConfig] = None
    ) -> "Decoder":
        try:
            raw = Path(path).read_bytes()
        except OSError as exc:
            raise exceptions.FileUnreadable(
                f"Failed to open {path}: {exc.strerror or exc}", path=str(path)
            ) from exc
        return cls(raw, config=config)

    def parse(self) -> list[MeasurementEvent]:
        return parse(self.raw, config=self.config)


def decode_file(
    path: Union[str, PathLike], *, config: Optional[DecodeConfig] = None
) -> list[MeasurementEvent]:
    """Convenience wrapper returning the events of a dump on disk."""
    return Decoder.from_file(path, config=config).parse()
