from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from reportdesk.models import ReportResult

PREVIEW_ROW_LIMIT = 10


@dataclass(frozen=True)
class DataPreview:
    columns: tuple[str, ...]
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    total_rows: int
    record_count: int

    @property
    def truncated(self) -> bool:
        return self.total_rows > len(self.rows)


def humanize_column(key: str) -> str:
    """``forecast_value`` -> ``Forecast Value``."""
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), key.replace("_", " "))


def format_cell(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        # Array.prototype.join renders null items as empty strings.
        return ",".join("" if item is None else format_cell(item) for item in value)
    return str(value)


def build_data_preview(result: ReportResult, limit: int = PREVIEW_ROW_LIMIT) -> DataPreview:
    # Columns come from the first row; later rows missing a key render as null.
    columns = tuple(result.rows[0].keys()) if result.rows else ()
    rows = tuple(
        tuple(format_cell(row.get(column)) for column in columns)
        for row in list(result.rows)[:limit]
    )
    return DataPreview(
        columns=columns,
        headers=tuple(humanize_column(column) for column in columns),
        rows=rows,
        total_rows=result.row_count,
        record_count=result.record_count,
    )
