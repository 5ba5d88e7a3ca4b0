from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from reportdesk.clients.report_service import ReportServiceClient
from reportdesk.core.config import get_settings
from reportdesk.services import (
    DownloadSink,
    MessageBoard,
    ReportOrchestrator,
    ReportSession,
    SessionRegistry,
    build_download_sink,
)


@lru_cache
def get_report_client() -> ReportServiceClient:
    return ReportServiceClient(get_settings())


@lru_cache
def get_download_sink() -> DownloadSink:
    return build_download_sink(get_settings())


@lru_cache
def get_session_registry() -> SessionRegistry:
    settings = get_settings()
    client = get_report_client()
    sink = get_download_sink()

    def make_orchestrator() -> ReportOrchestrator:
        return ReportOrchestrator(client, sink, MessageBoard(settings.message_ttl_seconds))

    return SessionRegistry(make_orchestrator, idle_seconds=settings.session_idle_seconds)


def get_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    return x_user_id or get_settings().default_user_id


def get_report_session(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> ReportSession:
    return registry.get(user_id)


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    settings = get_settings()
    expected = settings.api_key
    if expected is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API key not configured",
        )
    if x_api_key is None or x_api_key != expected:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
