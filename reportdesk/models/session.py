from __future__ import annotations

from dataclasses import dataclass

from .common import MessageType


@dataclass(frozen=True)
class StatusMessage:
    type: MessageType
    text: str
    posted_at: float

    @property
    def is_error(self) -> bool:
        return self.type is MessageType.ERROR
