from datetime import datetime, timedelta

import pytest

from voltlogic.types import MeasurementEvent

MAGIC = bytes([0xE0, 0xC5, 0xEA])
EOD = bytes([0xFF, 0xFF, 0xFF, 0xFF])

# Single block: 2014-09-11 18:43, one record 224.6V / 0.446A / 0.87
SAMPLE_DUMP = bytes(
    [
        0xE0, 0xC5, 0xEA,
        0x09, 0x0B, 0x0E, 0x12, 0x2B,
        0x08, 0xC6, 0x01, 0xBE, 0x57,
        0xFF, 0xFF, 0xFF, 0xFF,
    ]
)


def _header(start: datetime) -> bytes:
    return MAGIC + bytes([start.month, start.day, start.year - 2000, start.hour, start.minute])


def _record(voltage_raw: int, current_raw: int, pf_raw: int) -> bytes:
    return voltage_raw.to_bytes(2, "big") + current_raw.to_bytes(2, "big") + bytes([pf_raw])


@pytest.fixture
def sample_dump():
    return SAMPLE_DUMP


@pytest.fixture
def build_dump():
    """Build a dump from [(block_start, [(v_raw, i_raw, pf_raw), ...]), ...]."""

    def _build(blocks, end_marker=True):
        out = b""
        for start, records in blocks:
            out += _header(start)
            for rec in records:
                out += _record(*rec)
        if end_marker:
            out += EOD
        return out

    return _build


@pytest.fixture
def make_event():
    def _make(ts, voltage=230.0, current=1.0, power_factor=1.0):
        return MeasurementEvent(
            timestamp=ts, voltage=voltage, current=current, power_factor=power_factor
        )

    return _make


@pytest.fixture
def minute_events(make_event):
    """Two hours of one-minute samples starting 2025-01-01 23:00 (crosses midnight)."""
    start = datetime(2025, 1, 1, 23, 0)
    return [
        make_event(start + timedelta(minutes=i), voltage=220.0 + (i % 10), current=2.0)
        for i in range(120)
    ]
