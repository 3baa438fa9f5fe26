from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from . import canon

VoltagePolicy = Literal["reject", "warn", "ignore"]


class DecodeConfig(BaseModel):
    """Plausibility policy applied to every decoded record.

    A voltage is plausible when ``voltage_min < v < voltage_max``. Records
    outside that window are structurally valid, so the policy decides:

      - 'reject': raise VoltageOutOfRange and abort the decode
      - 'warn': keep the records, logging one warning per dump
      - 'ignore': keep the record silently
    """

    voltage_min: float = Field(default=canon.DEFAULT_VOLTAGE_MIN, ge=0.0)
    voltage_max: float = Field(default=canon.DEFAULT_VOLTAGE_MAX, gt=0.0)
    voltage_policy: VoltagePolicy = "warn"

    @model_validator(mode="after")
    def _check_window(self) -> "DecodeConfig":
        if self.voltage_min >= self.voltage_max:
            raise ValueError("voltage_min must be below voltage_max")
        return self


@dataclass
class ReportConfig:
    history_txt: str = canon.PARAMETER_HISTORY_FILE_TEXT
    history_csv: str = canon.PARAMETER_HISTORY_FILE_CSV
    stats_txt: str = canon.STATS_FILE_TEXT
    stats_json: str = canon.STATS_FILE_JSON
    write_json: bool = False


@dataclass
class AnalyzerConfig:
    decode: DecodeConfig = field(default_factory=DecodeConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def default_config() -> AnalyzerConfig:
    return AnalyzerConfig()
