"""
Interaction controller: model availability at startup and the send-message
lifecycle.

All observable effects go through the ``ConversationStore``. The controller
itself only owns the session handle and the phase implied by it.
"""

from __future__ import annotations

import enum
import inspect
import logging
from typing import Any, Callable

from .exceptions import AppleFMSetupError
from .models import Origin
from .protocols import (
    LanguageModel,
    LanguageModelSession,
    UnavailableReason,
    create_model,
    create_session,
    reply_text,
)
from .store import ConversationStore

logger = logging.getLogger("foundation_chat.controller")

STATUS_READY = "Model ready."
STATUS_BY_REASON: dict[UnavailableReason, str] = {
    UnavailableReason.DEVICE_NOT_ELIGIBLE: "Device not eligible for Apple Intelligence.",
    UnavailableReason.APPLE_INTELLIGENCE_NOT_ENABLED: (
        "Please enable Apple Intelligence in Settings."
    ),
    UnavailableReason.MODEL_NOT_READY: "Model not ready (downloading or unavailable).",
    UnavailableReason.UNKNOWN: "Unknown error: model unavailable.",
}
ERROR_PREFIX = "Error: "


class ControllerPhase(enum.Enum):
    UNINITIALIZED = "uninitialized"
    CHECKING = "checking"
    READY = "ready"
    UNAVAILABLE = "unavailable"


def status_for_availability(is_available: bool, reason: Any = None) -> str:
    """Deterministic mapping from an availability result to a status string."""
    if is_available:
        return STATUS_READY
    return STATUS_BY_REASON[UnavailableReason.classify(reason)]


def describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class ChatController:
    """Drives a single on-device chat session on behalf of a view.

    Args:
        store: The conversation state the controller writes into.
        model_factory: Returns the language model to probe. Defaults to the system model.
        session_factory: Called as ``session_factory(instructions=..., model=...)``.
        instructions: Optional system instructions for the session.
    """

    def __init__(
        self,
        store: ConversationStore,
        model_factory: Callable[[], LanguageModel] = create_model,
        session_factory: Callable[..., LanguageModelSession] = create_session,
        instructions: str | None = None,
    ) -> None:
        self.store = store
        self._model_factory = model_factory
        self._session_factory = session_factory
        self._instructions = instructions
        self._session: LanguageModelSession | None = None
        self._phase = ControllerPhase.UNINITIALIZED

    @property
    def phase(self) -> ControllerPhase:
        return self._phase

    @property
    def session(self) -> LanguageModelSession | None:
        return self._session

    @property
    def is_ready(self) -> bool:
        return self._session is not None

    async def initialize(self) -> None:
        """Check model availability once and acquire a session if possible.

        Never raises: every outcome, including a missing SDK, ends up as a
        status string on the store. Calls after the first are ignored.
        """
        if self._phase is not ControllerPhase.UNINITIALIZED:
            logger.debug("[FoundationChat] initialize() already ran (phase=%s).", self._phase.value)
            return
        self._phase = ControllerPhase.CHECKING

        try:
            model = self._model_factory()
            is_available, raw_reason = model.is_available()
        except AppleFMSetupError as exc:
            logger.error("%s", exc)
            self._mark_unavailable(UnavailableReason.UNKNOWN)
            return
        except Exception:
            logger.warning("[FoundationChat] Availability check failed.", exc_info=True)
            self._mark_unavailable(UnavailableReason.UNKNOWN)
            return

        if not is_available:
            reason = UnavailableReason.classify(raw_reason)
            logger.info(
                "[FoundationChat] Model unavailable (reason=%r, classified=%s).",
                raw_reason,
                reason.value,
            )
            self._mark_unavailable(reason)
            return

        try:
            session = self._session_factory(instructions=self._instructions, model=model)
        except Exception:
            logger.warning("[FoundationChat] Could not create a model session.", exc_info=True)
            self._mark_unavailable(UnavailableReason.UNKNOWN)
            return

        self._session = session
        self._phase = ControllerPhase.READY
        await self._warm_up(session)
        self.store.set_status(STATUS_READY)

    async def send_message(self) -> None:
        """Send the current draft to the session and record both sides of the exchange.

        Silently does nothing when the draft is blank or no session exists.
        Concurrent calls are allowed; each appends its own reply when it resolves.
        """
        draft = self.store.draft
        session = self._session
        if not draft.strip() or session is None:
            logger.debug(
                "[FoundationChat] send_message() skipped (blank draft=%s, session=%s).",
                not draft.strip(),
                session is not None,
            )
            return

        self.store.append_message(draft, Origin.USER)
        prompt = draft
        self.store.set_draft("")

        try:
            reply = await session.respond(prompt)
        except Exception as exc:
            logger.warning("[FoundationChat] Session failed to respond: %s", describe_error(exc))
            self.store.append_message(ERROR_PREFIX + describe_error(exc), Origin.ASSISTANT)
            return

        self.store.append_message(reply_text(reply), Origin.ASSISTANT)

    def _mark_unavailable(self, reason: UnavailableReason) -> None:
        self._session = None
        self._phase = ControllerPhase.UNAVAILABLE
        self.store.set_status(STATUS_BY_REASON[reason])

    async def _warm_up(self, session: LanguageModelSession) -> None:
        prewarm = getattr(session, "prewarm", None)
        if not callable(prewarm):
            logger.debug("[FoundationChat] Session has no prewarm(); skipping warm-up.")
            return
        try:
            result = prewarm()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.warning("[FoundationChat] Session warm-up failed; continuing.", exc_info=True)
