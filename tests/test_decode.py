"""Decoder tests: binary layout, multi-block dumps and failure modes."""

import logging
from datetime import datetime, timedelta

import pytest

from voltlogic import decode, exceptions
from voltlogic.config import DecodeConfig


def test_sample_dump_decodes_single_event(sample_dump):
    events = decode.parse(sample_dump)
    assert len(events) == 1
    ev = events[0]
    assert ev.timestamp == datetime(2014, 9, 11, 18, 43)
    assert ev.voltage == 224.6
    assert ev.current == 0.446
    assert ev.power_factor == 0.87
    assert ev.active_power == pytest.approx(224.6 * 0.446 * 0.87 / 1000)
    assert ev.active_power == pytest.approx(0.0874, abs=5e-4)
    assert ev.apparent_power == pytest.approx(0.1002, abs=1e-4)


def test_field_primitives(sample_dump):
    assert decode.decode_timestamp(sample_dump, 3) == datetime(2014, 9, 11, 18, 43)
    assert decode.decode_record(sample_dump, 8) == (224.6, 0.446, 0.87)


def test_single_block_minute_increments(build_dump):
    start = datetime(2020, 2, 28, 23, 58)
    records = [(2300 + i, 1000, 95) for i in range(5)]
    events = decode.parse(build_dump([(start, records)]))

    assert len(events) == 5
    for i, ev in enumerate(events):
        assert ev.timestamp == start + timedelta(minutes=i)
    # Leap day and month rollover come from datetime arithmetic
    assert events[2].timestamp == datetime(2020, 2, 29, 0, 0)
    assert [e.voltage for e in events] == [230.0, 230.1, 230.2, 230.3, 230.4]


def test_each_block_header_resets_clock(build_dump):
    first = datetime(2015, 1, 1, 10, 0)
    second = datetime(2015, 1, 3, 8, 30)
    raw = build_dump(
        [
            (first, [(2300, 500, 90)] * 3),
            (second, [(2310, 600, 80)] * 2),
        ]
    )
    events = decode.parse(raw)
    assert [e.timestamp for e in events] == [
        first,
        first + timedelta(minutes=1),
        first + timedelta(minutes=2),
        second,
        second + timedelta(minutes=1),
    ]
    assert events[3].voltage == 231.0


def test_header_then_end_marker_yields_no_events(build_dump):
    assert decode.parse(build_dump([(datetime(2016, 5, 1, 0, 0), [])])) == []


@pytest.mark.parametrize(
    "raw",
    [b"", b"\xe0\xc5", b"\x00\xc5\xea\x09\x0b\x0e\x12\x2b\xff\xff\xff\xff", b"\xff\xff\xff\xff"],
)
def test_bad_header_is_invalid_format(raw):
    with pytest.raises(exceptions.InvalidFormat):
        decode.parse(raw)


def test_missing_end_marker_is_truncated(build_dump):
    raw = build_dump([(datetime(2016, 5, 1, 0, 0), [(2300, 100, 99)] * 2)], end_marker=False)
    with pytest.raises(exceptions.Truncated) as excinfo:
        decode.parse(raw)
    assert excinfo.value.offset == len(raw)


def test_partial_record_is_truncated(build_dump):
    raw = build_dump([(datetime(2016, 5, 1, 0, 0), [(2300, 100, 99)])], end_marker=False)
    with pytest.raises(exceptions.Truncated) as excinfo:
        decode.parse(raw + b"\x08\xc6\x01")
    assert excinfo.value.offset == len(raw)


def test_partial_block_timestamp_is_truncated():
    with pytest.raises(exceptions.Truncated) as excinfo:
        decode.parse(b"\xe0\xc5\xea\x09\x0b")
    assert excinfo.value.offset == 3


def test_invalid_block_date_is_invalid_format():
    raw = b"\xe0\xc5\xea" + bytes([13, 1, 15, 0, 0]) + b"\xff\xff\xff\xff"
    with pytest.raises(exceptions.InvalidFormat, match="offset 3"):
        decode.parse(raw)


def test_bytearray_input(sample_dump):
    assert len(decode.parse(bytearray(sample_dump))) == 1


def test_out_of_range_voltage_warns_by_default(build_dump, caplog):
    raw = build_dump([(datetime(2016, 5, 1, 0, 0), [(1200, 100, 99), (2300, 100, 99)])])
    with caplog.at_level(logging.WARNING, logger="voltlogic"):
        events = decode.parse(raw)
    assert len(events) == 2
    assert events[0].voltage == 120.0
    assert "120.0V" in caplog.text


def test_out_of_range_voltages_warn_once_per_dump(build_dump, caplog):
    bad = [(1200 + i, 100, 99) for i in range(50)]
    raw = build_dump([(datetime(2016, 5, 1, 0, 0), bad + [(2300, 100, 99)])])
    with caplog.at_level(logging.DEBUG, logger="voltlogic"):
        events = decode.parse(raw)
    assert len(events) == 51

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].getMessage().startswith("50 record(s) outside")
    assert "first 120.0V at offset 8" in warnings[0].getMessage()

    per_record = [
        r for r in caplog.records if r.levelno == logging.DEBUG and "outside" in r.getMessage()
    ]
    assert len(per_record) == 50


def test_out_of_range_voltage_rejected_by_policy(build_dump):
    raw = build_dump([(datetime(2016, 5, 1, 0, 0), [(2300, 100, 99), (2600, 100, 99)])])
    with pytest.raises(exceptions.VoltageOutOfRange) as excinfo:
        decode.parse(raw, config=DecodeConfig(voltage_policy="reject"))
    assert excinfo.value.voltage == 260.0
    assert excinfo.value.offset == 13


def test_out_of_range_voltage_ignored_by_policy(build_dump, caplog):
    raw = build_dump([(datetime(2016, 5, 1, 0, 0), [(0, 0, 0)])])
    with caplog.at_level(logging.WARNING, logger="voltlogic"):
        events = decode.parse(raw, config=DecodeConfig(voltage_policy="ignore"))
    assert events[0].voltage == 0.0
    assert caplog.text == ""


def test_decoder_from_file(tmp_path, sample_dump):
    path = tmp_path / "dump.bin"
    path.write_bytes(sample_dump)
    assert len(decode.Decoder.from_file(path).parse()) == 1
    assert decode.decode_file(str(path))[0].timestamp == datetime(2014, 9, 11, 18, 43)


def test_missing_file_is_unreadable(tmp_path):
    with pytest.raises(exceptions.FileUnreadable) as excinfo:
        decode.Decoder.from_file(tmp_path / "nope.bin")
    assert excinfo.value.path.endswith("nope.bin")
