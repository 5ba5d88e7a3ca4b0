from __future__ import annotations

import time
from typing import Callable

from reportdesk.models import MessageType, StatusMessage

DEFAULT_TTL_SECONDS = 3.0


class MessageBoard:
    """Holds the single user-visible status message and expires it after a TTL."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._message: StatusMessage | None = None

    def post_success(self, text: str) -> StatusMessage:
        return self._post(MessageType.SUCCESS, text)

    def post_error(self, text: str) -> StatusMessage:
        return self._post(MessageType.ERROR, text)

    def clear(self) -> None:
        self._message = None

    @property
    def current(self) -> StatusMessage | None:
        message = self._message
        if message is None:
            return None
        if self._clock() - message.posted_at >= self._ttl:
            self._message = None
            return None
        return message

    def _post(self, message_type: MessageType, text: str) -> StatusMessage:
        self._message = StatusMessage(type=message_type, text=text, posted_at=self._clock())
        return self._message
