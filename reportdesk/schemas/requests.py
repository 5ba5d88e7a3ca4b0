from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from reportdesk.models import DateRange, ExportFormat, ReportType


class SelectionRequest(BaseModel):
    report_type: Optional[ReportType] = Field(default=None, description="Report to generate")
    date_range: Optional[DateRange] = Field(default=None, description="Date range filter")


class ExportRequest(BaseModel):
    format: ExportFormat = Field(..., description="Export format: pdf, csv or excel")
