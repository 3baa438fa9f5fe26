from __future__ import annotations
import logging
from typing import Sequence

from . import exceptions
from .config import DecodeConfig
from .types import MeasurementEvent

logger = logging.getLogger(__name__)


def is_plausible_voltage(voltage: float, config: DecodeConfig) -> bool:
    return config.voltage_min < voltage < config.voltage_max


def check_voltage(voltage: float, offset: int, config: DecodeConfig) -> bool:
    """Apply the configured plausibility policy to one decoded voltage.

    Returns False for a record kept under the 'warn' policy, so the caller
    can report one count per dump. Each such record is logged at DEBUG.
    """
    if config.voltage_policy == "ignore" or is_plausible_voltage(voltage, config):
        return True
    message = (
        f"Voltage {voltage:.1f}V at offset {offset} outside "
        f"({config.voltage_min:.1f}V, {config.voltage_max:.1f}V)"
    )
    if config.voltage_policy == "reject":
        raise exceptions.VoltageOutOfRange(message, offset=offset, voltage=voltage)
    logger.debug(message)
    return False


def assert_chronological(events: Sequence[MeasurementEvent]) -> None:
    """Timestamps must be strictly increasing (sorted, one event per minute)."""
    for i in range(1, len(events)):
        prev, curr = events[i - 1].timestamp, events[i].timestamp
        if curr <= prev:
            raise exceptions.UnsortedInput(
                f"Events must be sorted and unique by timestamp; "
                f"{curr.isoformat()} follows {prev.isoformat()} at position {i}."
            )
