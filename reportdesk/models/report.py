from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Sequence

from .common import DateRange, ExportFormat, ReportType


@dataclass(frozen=True)
class ReportRequest:
    report_type: ReportType
    date_range: DateRange
    user_id: str

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user_id is required")

    def to_payload(self) -> dict[str, str]:
        return {
            "report_type": self.report_type.value,
            "date_range": self.date_range.value,
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class ReportResult:
    request: ReportRequest
    rows: Sequence[Mapping[str, Any]] = field(default_factory=tuple)
    record_count: int = 0
    start_date: date | str | None = None
    end_date: date | str | None = None
    generated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.record_count < 0:
            raise ValueError("record_count must not be negative")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def has_rows(self) -> bool:
        return bool(self.rows)

    @property
    def counts_diverge(self) -> bool:
        """True when the server-reported count disagrees with the rows received."""
        return self.record_count != self.row_count


@dataclass(frozen=True)
class InsightResult:
    summary: str | None = None
    key_findings: tuple[str, ...] | None = None

    @property
    def is_empty(self) -> bool:
        return not self.summary and not self.key_findings


@dataclass(frozen=True)
class ExportJob:
    format: ExportFormat
    source_request: ReportRequest

    def filename(self, on: date) -> str:
        return f"{self.source_request.report_type.value}_report_{on.isoformat()}.{self.format.file_extension}"

    def to_payload(self) -> dict[str, str]:
        payload = self.source_request.to_payload()
        payload["format"] = self.format.value
        return payload


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class SavedDownload:
    filename: str
    location: str
    content_type: str
    size_bytes: int
    saved_at: datetime
