"""
In-memory conversation state with an explicit publish/subscribe channel.

The store holds three things: the append-only message sequence, the current
draft, and the readiness status string. Views never poll fields; they
``subscribe()`` and react to ``StoreChange`` events.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .models import ChatMessage, Origin

logger = logging.getLogger("foundation_chat.store")

INITIAL_STATUS = "Initializing model..."


class ChangeKind(enum.Enum):
    MESSAGES = "messages"
    DRAFT = "draft"
    STATUS = "status"


@dataclass(frozen=True)
class StoreChange:
    """Notification delivered to store listeners after a mutation."""

    kind: ChangeKind
    value: Any
    message: ChatMessage | None = None


Listener = Callable[[StoreChange], None]


class ConversationStore:
    """Ordered messages, draft text and readiness status for one chat screen."""

    def __init__(self, status: str = INITIAL_STATUS) -> None:
        self._messages: list[ChatMessage] = []
        self._draft = ""
        self._status = status
        self._listeners: list[Listener] = []

    # -- read accessors -----------------------------------------------------

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def draft(self) -> str:
        return self._draft

    @property
    def status(self) -> str:
        return self._status

    # -- mutations ----------------------------------------------------------

    def append_message(self, content: str, origin: Origin) -> ChatMessage:
        message = ChatMessage(content=content, origin=origin)
        self._messages.append(message)
        logger.debug(
            "[FoundationChat] Appended %s message %s (%d chars).",
            origin.value,
            message.id,
            len(content),
        )
        self._publish(StoreChange(ChangeKind.MESSAGES, self.messages, message))
        return message

    def set_draft(self, text: str) -> None:
        if text == self._draft:
            return
        self._draft = text
        self._publish(StoreChange(ChangeKind.DRAFT, text))

    def set_status(self, text: str) -> None:
        if text == self._status:
            return
        self._status = text
        logger.info("[FoundationChat] Status: %s", text)
        self._publish(StoreChange(ChangeKind.STATUS, text))

    # -- subscriptions ------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, change: StoreChange) -> None:
        # Copy so listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.warning(
                    "[FoundationChat] Store listener %r failed on %s change.",
                    listener,
                    change.kind.value,
                    exc_info=True,
                )
