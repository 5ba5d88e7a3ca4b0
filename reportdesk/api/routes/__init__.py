from __future__ import annotations

from fastapi import APIRouter

from . import health, reports

router = APIRouter()
router.include_router(health.router)
router.include_router(reports.router)

__all__ = ["router"]
