from __future__ import annotations

from fastapi import APIRouter, Depends

from reportdesk.api.deps import get_session_registry
from reportdesk.services import SessionRegistry

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Service healthcheck")
def healthcheck(registry: SessionRegistry = Depends(get_session_registry)) -> dict[str, str | int]:
    return {"status": "ok", "active_sessions": len(registry)}
