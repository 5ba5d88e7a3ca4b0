from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone
from typing import Callable, Protocol

from reportdesk.core.errors import (
    EmptyDataError,
    HttpStatusError,
    PreconditionError,
    ReportDeskError,
    ServerReportedError,
)
from reportdesk.core.logging import get_logger
from reportdesk.models import (
    ExportedFile,
    ExportFormat,
    ExportJob,
    InsightResult,
    ReportRequest,
    ReportResult,
    SavedDownload,
    SessionState,
    StatusMessage,
)
from reportdesk.services.download_sink import DownloadSink
from reportdesk.services.messages import MessageBoard

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No data available for the selected report and date range. The database tables may be empty."
NO_REPORT_MESSAGE = "Please generate a report first"
EXPORT_FAILED_MESSAGE = "Export failed. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please try again."


class ReportBackend(Protocol):
    async def generate_report(self, request: ReportRequest) -> ReportResult:
        ...

    async def fetch_insights(self, result: ReportResult) -> InsightResult:
        ...

    async def export_report(self, job: ExportJob, *, filename: str) -> ExportedFile:
        ...


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ReportOrchestrator:
    """Sequences generate, insights and export for one report session.

    The orchestrator owns the current ``ReportResult`` and ``InsightResult``.
    Every failure is caught here and turned into the single status message;
    insight failures are logged and otherwise ignored.

    A new ``generate`` cancels a still-running one and any pending insight
    fetch, so a late response can never overwrite a newer report.
    """

    def __init__(
        self,
        client: ReportBackend,
        sink: DownloadSink,
        messages: MessageBoard | None = None,
        *,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._client = client
        self._sink = sink
        self._messages = messages or MessageBoard()
        self._today = today
        self._report: ReportResult | None = None
        self._insights: InsightResult | None = None
        self._settled = SessionState.IDLE
        self._generation = 0
        self._generate_task: asyncio.Task[ReportResult | None] | None = None
        self._insights_task: asyncio.Task[None] | None = None
        self._exports_in_flight = 0
        self.last_error: Exception | None = None

    @property
    def report(self) -> ReportResult | None:
        return self._report

    @property
    def insights(self) -> InsightResult | None:
        return self._insights

    @property
    def message(self) -> StatusMessage | None:
        return self._messages.current

    @property
    def is_generating(self) -> bool:
        return self._generate_task is not None and not self._generate_task.done()

    @property
    def is_exporting(self) -> bool:
        return self._exports_in_flight > 0

    @property
    def insights_pending(self) -> bool:
        return self._insights_task is not None and not self._insights_task.done()

    @property
    def state(self) -> SessionState:
        if self.is_generating:
            return SessionState.GENERATING
        if self.is_exporting:
            return SessionState.EXPORTING
        if self.insights_pending:
            return SessionState.FETCHING_INSIGHTS
        return self._settled

    async def generate(self, request: ReportRequest) -> ReportResult | None:
        self._cancel_pending()
        self._generation += 1
        self._messages.clear()
        self.last_error = None

        task = asyncio.create_task(self._run_generate(request, self._generation))
        self._generate_task = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("Generate for %s superseded by a newer request", request.report_type)
            return None
        finally:
            if self._generate_task is task:
                self._generate_task = None

    async def fetch_insights(self, result: ReportResult) -> InsightResult | None:
        try:
            return await self._client.fetch_insights(result)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not fetch AI insights for %s: %s", result.request.report_type, exc)
            return None

    async def wait_for_insights(self) -> InsightResult | None:
        task = self._insights_task
        if task is not None and not task.done():
            await asyncio.wait({task})
        return self._insights

    async def export(self, export_format: ExportFormat | str) -> SavedDownload | None:
        self._messages.clear()
        self.last_error = None
        if not isinstance(export_format, ExportFormat):
            export_format = ExportFormat.from_raw(export_format)

        report = self._report
        if report is None:
            self.reject(PreconditionError(NO_REPORT_MESSAGE))
            return None

        job = ExportJob(format=export_format, source_request=report.request)
        filename = job.filename(self._today())
        logger.info("Exporting %s as %s", job.source_request.report_type, filename)

        self._exports_in_flight += 1
        try:
            exported = await self._client.export_report(job, filename=filename)
            saved = self._sink.save(exported, user_id=job.source_request.user_id)
        except HttpStatusError as exc:
            return self._fail_export(exc, EXPORT_FAILED_MESSAGE)
        except OSError as exc:
            return self._fail_export(exc, EXPORT_FAILED_MESSAGE)
        except ReportDeskError as exc:
            return self._fail_export(exc, NETWORK_ERROR_MESSAGE)
        finally:
            self._exports_in_flight -= 1

        self._settled = SessionState.GENERATED
        self._messages.post_success(f"Report exported as {export_format.label} successfully!")
        return saved

    def reject(self, error: ReportDeskError) -> None:
        self.last_error = error
        self._messages.post_error(str(error))

    def close(self) -> None:
        self._cancel_pending()
        self._generation += 1

    async def _run_generate(self, request: ReportRequest, generation: int) -> ReportResult | None:
        logger.info(
            "Generating %s report for %s (user %s)",
            request.report_type,
            request.date_range,
            request.user_id,
        )
        try:
            result = await self._client.generate_report(request)
        except ServerReportedError as exc:
            return self._fail_generate(exc, f"Error: {exc.detail}")
        except ReportDeskError as exc:
            return self._fail_generate(exc, f"Failed to generate report: {exc}")

        self._report = result
        self._insights = None
        self._settled = SessionState.GENERATED

        if not result.has_rows:
            self.last_error = EmptyDataError(NO_DATA_MESSAGE)
            self._messages.post_error(NO_DATA_MESSAGE)
            logger.info("Report %s returned no rows", request.report_type)
            return result

        if result.counts_diverge:
            logger.warning(
                "Report %s reported %d records but returned %d rows",
                request.report_type,
                result.record_count,
                result.row_count,
            )
        self._messages.post_success(f"Report generated successfully! ({result.record_count} records)")
        self._insights_task = asyncio.create_task(self._load_insights(result, generation))
        return result

    async def _load_insights(self, result: ReportResult, generation: int) -> None:
        insights = await self.fetch_insights(result)
        if insights is None or generation != self._generation:
            return
        self._insights = insights

    def _fail_generate(self, exc: ReportDeskError, text: str) -> None:
        logger.error("Error generating report: %s", exc)
        self.last_error = exc
        self._settled = SessionState.GENERATE_FAILED
        self._messages.post_error(text)
        return None

    def _fail_export(self, exc: Exception, text: str) -> None:
        logger.error("Error exporting report: %s", exc)
        self.last_error = exc
        self._settled = SessionState.EXPORT_FAILED
        self._messages.post_error(text)
        return None

    def _cancel_pending(self) -> None:
        if self._generate_task is not None and not self._generate_task.done():
            self._generate_task.cancel()
        if self._insights_task is not None and not self._insights_task.done():
            self._insights_task.cancel()
        self._insights_task = None
