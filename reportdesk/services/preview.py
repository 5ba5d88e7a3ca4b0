from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from reportdesk.core.errors import PreconditionError
from reportdesk.core.logging import get_logger
from reportdesk.models import ExportFormat, SavedDownload
from reportdesk.services.orchestrator import NO_REPORT_MESSAGE, ReportOrchestrator
from reportdesk.services.table import DataPreview

logger = get_logger(__name__)


@dataclass(frozen=True)
class PreviewContext:
    format: ExportFormat
    title: str
    row_count: int
    record_count: int
    start_date: date | str | None
    end_date: date | str | None
    generated_at: datetime | None
    summary: str | None

    @property
    def date_range(self) -> str:
        return f"{_or_blank(self.start_date)} to {_or_blank(self.end_date)}"


class PreviewRenderer:
    def __init__(self) -> None:
        templates_path = Path(__file__).resolve().parent.parent / "templates"
        self._jinja = Environment(
            loader=FileSystemLoader(templates_path),
            autoescape=select_autoescape(["html"]),
        )
        self._dialog_template = self._jinja.get_template("preview.html")
        self._table_template = self._jinja.get_template("report_table.html")

    def render_dialog(self, context: PreviewContext) -> str:
        return self._dialog_template.render(
            format=context.format.value,
            format_label=context.format.label,
            title=context.title,
            row_count=context.row_count,
            record_count=context.record_count,
            date_range=context.date_range,
            generated_on=context.generated_at.date().isoformat() if context.generated_at else "",
            summary=context.summary,
        )

    def render_table(self, preview: DataPreview) -> str:
        return self._table_template.render(preview=preview)


class ExportPreviewDialog:
    """Format-specific preview over the orchestrator's current report.

    Holds only a read reference to the orchestrator plus its own format
    choice; downloading goes through ``ReportOrchestrator.export``.
    """

    def __init__(self, orchestrator: ReportOrchestrator, renderer: PreviewRenderer | None = None) -> None:
        self._orchestrator = orchestrator
        self._renderer = renderer or PreviewRenderer()
        self.preview_format = ExportFormat.PDF
        self.is_open = False

    @property
    def renderer(self) -> PreviewRenderer:
        return self._renderer

    def open(self, export_format: ExportFormat | str) -> bool:
        if self._orchestrator.report is None:
            self._orchestrator.reject(PreconditionError(NO_REPORT_MESSAGE))
            return False
        if not isinstance(export_format, ExportFormat):
            export_format = ExportFormat.from_raw(export_format)
        self.preview_format = export_format
        self.is_open = True
        return True

    def close(self) -> None:
        self.is_open = False

    def build_context(self) -> PreviewContext:
        report = self._orchestrator.report
        if report is None:
            raise PreconditionError(NO_REPORT_MESSAGE)
        insights = self._orchestrator.insights
        return PreviewContext(
            format=self.preview_format,
            title=report.request.report_type.heading,
            row_count=report.row_count,
            record_count=report.record_count,
            start_date=report.start_date,
            end_date=report.end_date,
            generated_at=report.generated_at,
            summary=insights.summary if insights else None,
        )

    def render(self) -> str:
        return self._renderer.render_dialog(self.build_context())

    async def download(self) -> SavedDownload | None:
        saved = await self._orchestrator.export(self.preview_format)
        if saved is not None:
            self.close()
        else:
            logger.info("Preview download of %s failed; dialog stays open", self.preview_format)
        return saved


def _or_blank(value: date | str | None) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return value or ""
