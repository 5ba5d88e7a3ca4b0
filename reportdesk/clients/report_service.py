from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import ValidationError

from reportdesk.core.config import Settings, get_settings
from reportdesk.core.errors import (
    EmptyBodyError,
    HttpStatusError,
    MalformedResponseError,
    ServerReportedError,
    TransportError,
)
from reportdesk.core.logging import get_logger
from reportdesk.models import ExportedFile, ExportJob, InsightResult, ReportRequest, ReportResult
from reportdesk.schemas.backend import InsightPayload, ReportPayload

logger = get_logger(__name__)

RAW_PREVIEW_CHARS = 100


class ReportServiceClient:
    """HTTP client for the remote report, insight and export endpoints.

    Every call is a single attempt: no retries, and no timeout unless
    ``http_timeout_seconds`` is configured.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        if not settings.report_api_base_url:
            raise RuntimeError("Report service base URL not configured")

        base_url = settings.report_api_base_url.rstrip("/") + "/"
        self._generate_url = base_url + settings.report_generate_path.lstrip("/")
        self._insights_url = base_url + settings.report_insights_path.lstrip("/")
        self._export_url = base_url + settings.report_export_path.lstrip("/")
        self._timeout = httpx.Timeout(settings.http_timeout_seconds)
        self._transport = transport

    async def generate_report(self, request: ReportRequest) -> ReportResult:
        response = await self._post(self._generate_url, request.to_payload())
        text = response.text
        logger.debug("Report service returned %d characters for %s", len(text), request.report_type)
        if not text:
            raise EmptyBodyError()

        try:
            raw = json.loads(text)
        except ValueError as exc:
            raise MalformedResponseError(
                f"Invalid JSON response: {text[:RAW_PREVIEW_CHARS]}", raw_body=text
            ) from exc
        try:
            payload = ReportPayload.model_validate(raw)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Unexpected response structure: {text[:RAW_PREVIEW_CHARS]}", raw_body=text
            ) from exc

        if payload.error:
            raise ServerReportedError(payload.error)

        rows = tuple(payload.data or ())
        record_count = payload.record_count if payload.record_count is not None else len(rows)
        return ReportResult(
            request=request,
            rows=rows,
            record_count=record_count,
            start_date=payload.start_date,
            end_date=payload.end_date,
            generated_at=payload.generated_at,
        )

    async def fetch_insights(self, result: ReportResult) -> InsightResult:
        body = {
            "report_type": result.request.report_type.value,
            "report_data": [dict(row) for row in result.rows],
            "user_id": result.request.user_id,
        }
        response = await self._post(self._insights_url, body)
        try:
            payload = InsightPayload.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise MalformedResponseError(
                f"Invalid insights response: {response.text[:RAW_PREVIEW_CHARS]}", raw_body=response.text
            ) from exc

        findings = None
        if payload.key_findings is not None:
            findings = tuple(str(item) for item in payload.key_findings)
        return InsightResult(summary=payload.summary, key_findings=findings)

    async def export_report(self, job: ExportJob, *, filename: str) -> ExportedFile:
        response = await self._post(self._export_url, job.to_payload())
        content_type = response.headers.get("content-type", "application/octet-stream")
        return ExportedFile(filename=filename, content=response.content, content_type=content_type)

    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.RequestError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        if not response.is_success:
            raise HttpStatusError(response.status_code, response.reason_phrase)
        return response
