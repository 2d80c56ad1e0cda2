from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .rules import OUTPUT_DELIMITER, TIME_UNIT_HOUR, TIME_UNIT_MONTH


class RecordTag(str, Enum):
    SKIP = "skip"
    BUNDLE_START = "bundle_start"
    OTHER = "other"


class TimeUnit(str, Enum):
    HOUR = TIME_UNIT_HOUR
    MONTH = TIME_UNIT_MONTH


class ValuePair(BaseModel):
    model_config = ConfigDict(frozen=True)

    value1: str
    value2: str


class Bundle(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_index: int
    sensor_id: str
    start_timestamp: datetime
    time_unit: TimeUnit
    values: List[ValuePair] = Field(default_factory=list)


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp as yyyyMMddHHmm, independent of locale."""
    return f"{ts.year:04d}{ts.month:02d}{ts.day:02d}{ts.hour:02d}{ts.minute:02d}"


class OutputRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    sensor_id: str
    value1: str
    value2: str

    def render(self) -> str:
        fields = [format_timestamp(self.timestamp), self.sensor_id, self.value1, self.value2]
        return OUTPUT_DELIMITER.join(fields) + OUTPUT_DELIMITER


class ReportSummary(BaseModel):
    lines: int = 0
    bundles: int = 0
    rows: int = 0
    skipped_lines: int = 0
    other_lines: int = 0
    warnings: int = 0
    strict: bool = True


class ReportItem(BaseModel):
    line: Optional[int] = None
    issue: str
    value: Optional[str] = None
    action: str


class ConversionReport(BaseModel):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    warnings: List[ReportItem] = Field(default_factory=list)


class ConvertedFile(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class ConvertResponse(BaseModel):
    filename: str
    converted: ConvertedFile
    report: ConversionReport


class HealthResponse(BaseModel):
    ok: bool = True
