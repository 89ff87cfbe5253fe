from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime


def utc_now_iso() -> str:
    """Return a stable UTC timestamp string."""
    return datetime.now(UTC).replace(microsecond=0).isoformat()


def new_message_id() -> str:
    return uuid.uuid4().hex


class Origin(enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """One exchanged message. Never mutated once created."""

    content: str
    origin: Origin
    id: str = field(default_factory=new_message_id)
    created_at: str = field(default_factory=utc_now_iso, compare=False)

    @property
    def is_user(self) -> bool:
        return self.origin is Origin.USER

    @property
    def speaker(self) -> str:
        return "You" if self.is_user else "Assistant"
