from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from reportdesk.api.deps import get_report_session, get_session_registry, get_user_id, require_api_key
from reportdesk.core.errors import PreconditionError
from reportdesk.models import DateRange, ReportType, SavedDownload, StatusMessage
from reportdesk.schemas.requests import ExportRequest, SelectionRequest
from reportdesk.schemas.responses import (
    CatalogResponse,
    DataPreviewSchema,
    DateRangeSchema,
    DialogSchema,
    DownloadSchema,
    ExportResponse,
    InsightsSchema,
    MessageSchema,
    ReportSummarySchema,
    ReportTypeSchema,
    SelectionSchema,
    SessionResponse,
)
from reportdesk.services import ReportSession, SessionRegistry, build_data_preview
from reportdesk.services.orchestrator import NO_REPORT_MESSAGE

router = APIRouter(prefix="/v1/reports", tags=["reports"], dependencies=[Depends(require_api_key)])


@router.get("/catalog", response_model=CatalogResponse, summary="Available report types and date ranges")
def get_catalog() -> CatalogResponse:
    return CatalogResponse(
        report_types=[
            ReportTypeSchema(id=report_type, name=report_type.display_name, description=report_type.description)
            for report_type in ReportType
        ],
        date_ranges=[DateRangeSchema(value=date_range, label=date_range.label) for date_range in DateRange],
    )


@router.get("/session", response_model=SessionResponse, summary="Current report session")
async def get_session(session: ReportSession = Depends(get_report_session)) -> SessionResponse:
    return _to_session_response(session)


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT, summary="Discard the report session")
async def discard_session(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    registry.discard(user_id)


@router.put("/selection", response_model=SessionResponse, summary="Choose report type and date range")
async def update_selection(
    payload: SelectionRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionResponse:
    if payload.report_type is not None:
        session.selector.select_report(payload.report_type)
    if payload.date_range is not None:
        session.selector.select_date_range(payload.date_range)
    return _to_session_response(session)


@router.post("/generate", response_model=SessionResponse, summary="Generate the selected report")
async def generate_report(session: ReportSession = Depends(get_report_session)) -> SessionResponse:
    try:
        request = session.selector.build_request(session.user_id)
    except PreconditionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    await session.orchestrator.generate(request)
    return _to_session_response(session)


@router.get("/table", response_class=HTMLResponse, summary="First rows of the current report as HTML")
def render_table(session: ReportSession = Depends(get_report_session)) -> HTMLResponse:
    report = session.orchestrator.report
    if report is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=NO_REPORT_MESSAGE)
    return HTMLResponse(session.dialog.renderer.render_table(build_data_preview(report)))


@router.post("/export", response_model=ExportResponse, summary="Export the current report")
async def export_report(
    payload: ExportRequest,
    session: ReportSession = Depends(get_report_session),
) -> ExportResponse:
    saved = await session.orchestrator.export(payload.format)
    return _to_export_response(session, saved)


@router.post("/preview", response_model=SessionResponse, summary="Open the export preview dialog")
async def open_preview(
    payload: ExportRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionResponse:
    session.dialog.open(payload.format)
    return _to_session_response(session)


@router.get("/preview", response_class=HTMLResponse, summary="Render the export preview dialog")
def render_preview(session: ReportSession = Depends(get_report_session)) -> HTMLResponse:
    if not session.dialog.is_open:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Preview dialog is not open")
    return HTMLResponse(session.dialog.render())


@router.delete("/preview", response_model=SessionResponse, summary="Close the export preview dialog")
async def close_preview(session: ReportSession = Depends(get_report_session)) -> SessionResponse:
    session.dialog.close()
    return _to_session_response(session)


@router.post("/preview/download", response_model=ExportResponse, summary="Download from the preview dialog")
async def download_preview(session: ReportSession = Depends(get_report_session)) -> ExportResponse:
    if not session.dialog.is_open:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Preview dialog is not open")
    saved = await session.dialog.download()
    return _to_export_response(session, saved)


def _to_session_response(session: ReportSession) -> SessionResponse:
    orchestrator = session.orchestrator
    selector = session.selector

    report_summary = None
    if orchestrator.report is not None:
        report = orchestrator.report
        preview = build_data_preview(report)
        report_summary = ReportSummarySchema(
            report_type=report.request.report_type,
            date_range=report.request.date_range,
            record_count=report.record_count,
            row_count=report.row_count,
            counts_diverge=report.counts_diverge,
            start_date=report.start_date,
            end_date=report.end_date,
            generated_at=report.generated_at,
            preview=DataPreviewSchema(
                headers=list(preview.headers),
                rows=[list(row) for row in preview.rows],
                truncated=preview.truncated,
            ),
        )

    insights = None
    if orchestrator.insights is not None:
        findings = orchestrator.insights.key_findings
        insights = InsightsSchema(
            summary=orchestrator.insights.summary,
            key_findings=list(findings) if findings is not None else None,
        )

    return SessionResponse(
        user_id=session.user_id,
        state=orchestrator.state,
        is_generating=orchestrator.is_generating,
        is_exporting=orchestrator.is_exporting,
        selection=SelectionSchema(
            report_type=selector.report_type,
            date_range=selector.date_range,
            can_generate=selector.can_generate,
        ),
        report=report_summary,
        insights=insights,
        message=_to_message(orchestrator.message),
        dialog=DialogSchema(is_open=session.dialog.is_open, format=session.dialog.preview_format),
    )


def _to_export_response(session: ReportSession, saved: SavedDownload | None) -> ExportResponse:
    download = None
    if saved is not None:
        download = DownloadSchema(
            filename=saved.filename,
            location=saved.location,
            content_type=saved.content_type,
            size_bytes=saved.size_bytes,
            saved_at=saved.saved_at,
        )
    return ExportResponse(
        state=session.orchestrator.state,
        message=_to_message(session.orchestrator.message),
        download=download,
    )


def _to_message(message: StatusMessage | None) -> MessageSchema | None:
    if message is None:
        return None
    return MessageSchema(type=message.type, text=message.text)
