"""Configuration defaults and the voltage plausibility window."""

import pytest
from pydantic import ValidationError

from voltlogic import canon, exceptions, validate
from voltlogic.config import DecodeConfig, default_config


def test_default_config():
    cfg = default_config()
    assert cfg.decode.voltage_min == canon.DEFAULT_VOLTAGE_MIN
    assert cfg.decode.voltage_max == canon.DEFAULT_VOLTAGE_MAX
    assert cfg.decode.voltage_policy == "warn"
    assert cfg.report.stats_txt == "voltcraft_stats.txt"
    assert cfg.report.write_json is False


def test_decode_config_rejects_inverted_window():
    with pytest.raises(ValidationError):
        DecodeConfig(voltage_min=250.0, voltage_max=150.0)


def test_decode_config_rejects_unknown_policy():
    with pytest.raises(ValidationError):
        DecodeConfig(voltage_policy="abort")


@pytest.mark.parametrize(
    "voltage, plausible",
    [(150.0, False), (150.1, True), (230.0, True), (249.9, True), (250.0, False)],
)
def test_voltage_window_is_exclusive(voltage, plausible):
    assert validate.is_plausible_voltage(voltage, DecodeConfig()) is plausible


def test_check_voltage_reject_carries_offset():
    with pytest.raises(exceptions.VoltageOutOfRange) as excinfo:
        validate.check_voltage(300.0, 42, DecodeConfig(voltage_policy="reject"))
    assert excinfo.value.offset == 42
    assert isinstance(excinfo.value, exceptions.DecodeError)


def test_check_voltage_reports_kept_implausible_records():
    cfg = DecodeConfig()
    assert validate.check_voltage(230.0, 8, cfg) is True
    assert validate.check_voltage(120.0, 8, cfg) is False
    assert validate.check_voltage(120.0, 8, DecodeConfig(voltage_policy="ignore")) is True


def test_require_raises_given_exception():
    exceptions.require(True, "fine")
    with pytest.raises(exceptions.EmptyInput, match="nothing"):
        exceptions.require(False, "nothing", exceptions.EmptyInput)
