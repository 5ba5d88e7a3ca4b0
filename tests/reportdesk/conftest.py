import asyncio
import os
from datetime import date, datetime, timezone

import pytest

os.environ.setdefault("API_KEY", "test-key")

from reportdesk.models import (  # noqa: E402
    DateRange,
    ExportedFile,
    ExportJob,
    InsightResult,
    ReportRequest,
    ReportResult,
    ReportType,
    SavedDownload,
)
from reportdesk.services import MessageBoard, ReportOrchestrator  # noqa: E402

EXPORT_DAY = date(2024, 1, 15)


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubBackend:
    def __init__(self) -> None:
        self.rows: list[dict] = [{"model_name": "baseline", "accuracy": 0.91}]
        self.record_count: int | None = None
        self.generate_error: Exception | None = None
        self.generate_gate: asyncio.Event | None = None
        self.insights = InsightResult(summary="Accuracy is stable.", key_findings=("No drift detected",))
        self.insights_error: Exception | None = None
        self.insights_gate: asyncio.Event | None = None
        self.export_content = b"model_name,accuracy\nbaseline,0.91\n"
        self.export_content_type = "text/csv"
        self.export_error: Exception | None = None
        self.calls: list[tuple[str, object]] = []

    async def generate_report(self, request: ReportRequest) -> ReportResult:
        self.calls.append(("generate", request))
        gate = self.generate_gate
        if gate is not None:
            self.generate_gate = None
            await gate.wait()
        if self.generate_error is not None:
            raise self.generate_error
        rows = tuple(self.rows)
        return ReportResult(
            request=request,
            rows=rows,
            record_count=len(rows) if self.record_count is None else self.record_count,
            start_date=date(2023, 12, 16),
            end_date=date(2024, 1, 15),
            generated_at=datetime(2024, 1, 15, 9, 30),
        )

    async def fetch_insights(self, result: ReportResult) -> InsightResult:
        self.calls.append(("insights", result))
        if self.insights_gate is not None:
            await self.insights_gate.wait()
        if self.insights_error is not None:
            raise self.insights_error
        return self.insights

    async def export_report(self, job: ExportJob, *, filename: str) -> ExportedFile:
        self.calls.append(("export", job))
        if self.export_error is not None:
            raise self.export_error
        return ExportedFile(filename=filename, content=self.export_content, content_type=self.export_content_type)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class RecordingSink:
    def __init__(self) -> None:
        self.saved: list[ExportedFile] = []
        self.error: OSError | None = None

    def save(self, file: ExportedFile, *, user_id: str) -> SavedDownload:
        if self.error is not None:
            raise self.error
        self.saved.append(file)
        return SavedDownload(
            filename=file.filename,
            location=f"memory://{user_id}/{file.filename}",
            content_type=file.content_type,
            size_bytes=file.size_bytes,
            saved_at=datetime(2024, 1, 15, 9, 31, tzinfo=timezone.utc),
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> StubBackend:
    return StubBackend()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def orchestrator(backend: StubBackend, sink: RecordingSink, clock: FakeClock) -> ReportOrchestrator:
    return ReportOrchestrator(backend, sink, MessageBoard(3.0, clock), today=lambda: EXPORT_DAY)


@pytest.fixture
def predictions_request() -> ReportRequest:
    return ReportRequest(report_type=ReportType.PREDICTIONS, date_range=DateRange.LAST_30_DAYS, user_id="42")
