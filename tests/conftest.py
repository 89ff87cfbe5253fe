"""Shared mocks for the Foundation Models collaborators."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from foundation_chat.controller import ChatController
from foundation_chat.store import ConversationStore


def make_mock_model(available=True, reason=None):
    """Build a mock SystemLanguageModel whose is_available() returns (available, reason)."""
    model = MagicMock()
    model.is_available.return_value = (available, None if available else reason)
    return model


def make_mock_session(reply="Hi there!", error=None):
    """Build a mock LanguageModelSession with an async respond() and prewarm()."""
    session = MagicMock()
    if error is not None:
        session.respond = AsyncMock(side_effect=error)
    else:
        session.respond = AsyncMock(return_value=reply)
    session.prewarm = AsyncMock(return_value=None)
    return session


class GatedSession:
    """Session whose replies only resolve once the test calls ``release.set()``."""

    def __init__(self, reply="done"):
        self.reply = reply
        self.prompts = []
        self.release = asyncio.Event()

    async def respond(self, prompt):
        self.prompts.append(prompt)
        await self.release.wait()
        return self.reply


def make_controller(model=None, session=None, instructions=None):
    """Return ``(controller, session_factory_mock)`` wired to mock collaborators."""
    model = model if model is not None else make_mock_model()
    session = session if session is not None else make_mock_session()
    session_factory = MagicMock(return_value=session)
    controller = ChatController(
        ConversationStore(),
        model_factory=lambda: model,
        session_factory=session_factory,
        instructions=instructions,
    )
    return controller, session_factory
