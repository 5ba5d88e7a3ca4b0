from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel

from reportdesk.models import DateRange, ExportFormat, MessageType, ReportType, SessionState


class ReportTypeSchema(BaseModel):
    id: ReportType
    name: str
    description: str


class DateRangeSchema(BaseModel):
    value: DateRange
    label: str


class CatalogResponse(BaseModel):
    report_types: list[ReportTypeSchema]
    date_ranges: list[DateRangeSchema]


class SelectionSchema(BaseModel):
    report_type: Optional[ReportType]
    date_range: DateRange
    can_generate: bool


class MessageSchema(BaseModel):
    type: MessageType
    text: str


class DataPreviewSchema(BaseModel):
    headers: list[str]
    rows: list[list[str]]
    truncated: bool


class ReportSummarySchema(BaseModel):
    report_type: ReportType
    date_range: DateRange
    record_count: int
    row_count: int
    counts_diverge: bool
    start_date: Optional[Union[date, str]]
    end_date: Optional[Union[date, str]]
    generated_at: Optional[datetime]
    preview: DataPreviewSchema


class InsightsSchema(BaseModel):
    summary: Optional[str] = None
    key_findings: Optional[list[str]] = None


class DialogSchema(BaseModel):
    is_open: bool
    format: ExportFormat


class SessionResponse(BaseModel):
    user_id: str
    state: SessionState
    is_generating: bool
    is_exporting: bool
    selection: SelectionSchema
    report: Optional[ReportSummarySchema]
    insights: Optional[InsightsSchema]
    message: Optional[MessageSchema]
    dialog: DialogSchema


class DownloadSchema(BaseModel):
    filename: str
    location: str
    content_type: str
    size_bytes: int
    saved_at: datetime


class ExportResponse(BaseModel):
    state: SessionState
    message: Optional[MessageSchema]
    download: Optional[DownloadSchema]
