from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from reportdesk.core.logging import get_logger
from reportdesk.models import SessionState
from reportdesk.services.orchestrator import ReportOrchestrator
from reportdesk.services.preview import ExportPreviewDialog
from reportdesk.services.selector import ReportSelector

logger = get_logger(__name__)

DEFAULT_IDLE_SECONDS = 1800.0

_BUSY_STATES = frozenset(
    {SessionState.GENERATING, SessionState.EXPORTING, SessionState.FETCHING_INSIGHTS}
)


@dataclass
class ReportSession:
    user_id: str
    selector: ReportSelector
    orchestrator: ReportOrchestrator
    dialog: ExportPreviewDialog
    last_used: float = field(default=0.0, compare=False)


class SessionRegistry:
    """One report session per user, created on first use.

    A session left untouched for ``idle_seconds`` is closed the next time the
    registry is accessed, unless it still has work in flight.
    """

    def __init__(
        self,
        orchestrator_factory: Callable[[], ReportOrchestrator],
        *,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if idle_seconds <= 0:
            raise ValueError("idle_seconds must be positive")
        self._orchestrator_factory = orchestrator_factory
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: dict[str, ReportSession] = {}

    def get(self, user_id: str) -> ReportSession:
        now = self._clock()
        self._expire_idle(now)
        session = self._sessions.get(user_id)
        if session is None:
            orchestrator = self._orchestrator_factory()
            session = ReportSession(
                user_id=user_id,
                selector=ReportSelector(),
                orchestrator=orchestrator,
                dialog=ExportPreviewDialog(orchestrator),
            )
            self._sessions[user_id] = session
            logger.info("Opened report session for user %s", user_id)
        session.last_used = now
        return session

    def discard(self, user_id: str) -> bool:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.orchestrator.close()
        logger.info("Closed report session for user %s", user_id)
        return True

    def close_all(self) -> None:
        for user_id in list(self._sessions):
            self.discard(user_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def _expire_idle(self, now: float) -> None:
        expired = [
            user_id
            for user_id, session in self._sessions.items()
            if now - session.last_used >= self._idle_seconds
            and session.orchestrator.state not in _BUSY_STATES
        ]
        for user_id in expired:
            logger.info("Report session for user %s idle for %.0fs", user_id, self._idle_seconds)
            self.discard(user_id)
