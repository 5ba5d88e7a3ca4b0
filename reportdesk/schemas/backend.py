from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReportPayload(BaseModel):
    """Body returned by the remote report service.

    ``start_date`` and ``end_date`` are display-only: a clean ISO date is
    parsed, anything else is kept as the raw text.
    """

    model_config = ConfigDict(extra="ignore")

    data: Optional[list[dict[str, Any]]] = None
    record_count: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[Union[date, str]] = None
    end_date: Optional[Union[date, str]] = None
    generated_at: Optional[datetime] = None
    error: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> Any:
        if value is None or isinstance(value, date):
            return value
        text = str(value).strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            return text


class InsightPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    summary: Optional[str] = None
    key_findings: Optional[list[Any]] = None
