from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reportdesk.api import api_router
from reportdesk.api.deps import get_session_registry
from reportdesk.core.config import get_settings
from reportdesk.core.logging import configure_logging, get_logger

configure_logging(get_settings().log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Report Desk started")
    yield
    registry = get_session_registry()
    logger.info("Report Desk stopping with %d open sessions", len(registry))
    registry.close_all()


app = FastAPI(title="Report Desk", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
