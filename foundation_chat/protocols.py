"""
Collaborator contracts for the on-device language model, plus factories that
build the real ``apple_fm_sdk`` objects.

The controller only ever talks to objects shaped like ``LanguageModel`` and
``LanguageModelSession``; tests hand it mocks with the same shape.
"""

from __future__ import annotations

import enum
import re
from typing import Any, Awaitable, Protocol, runtime_checkable

from .exceptions import require_apple_fm


@runtime_checkable
class LanguageModel(Protocol):
    """Anything that can report whether the on-device model is usable."""

    def is_available(self) -> tuple[bool, Any]: ...


@runtime_checkable
class LanguageModelSession(Protocol):
    """A live session that answers one prompt per call."""

    def respond(self, prompt: str) -> Awaitable[Any]: ...


class UnavailableReason(enum.Enum):
    DEVICE_NOT_ELIGIBLE = "device_not_eligible"
    APPLE_INTELLIGENCE_NOT_ENABLED = "apple_intelligence_not_enabled"
    MODEL_NOT_READY = "model_not_ready"
    UNKNOWN = "unknown"

    @classmethod
    def classify(cls, raw: Any) -> UnavailableReason:
        """Map an SDK reason (enum member, string, or None) onto a known reason.

        Matching is by name, ignoring case and separators, so
        ``SystemLanguageModelUnavailableReason.MODEL_NOT_READY``, ``"modelNotReady"``
        and ``"model not ready"`` all classify the same way.
        """
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls.UNKNOWN
        name = getattr(raw, "name", None) or str(raw).rsplit(".", 1)[-1]
        needle = _normalize(name)
        for member in cls:
            if _normalize(member.value) == needle:
                return member
        # The SDK sometimes spells the feature flag without the product name.
        if needle == "featurenotenabled":
            return cls.APPLE_INTELLIGENCE_NOT_ENABLED
        return cls.UNKNOWN


def _normalize(value: str) -> str:
    return re.sub(r"[^a-z]", "", value.lower())


def reply_text(reply: Any) -> str:
    """Extract the text of a ``respond()`` result."""
    content = getattr(reply, "content", None)
    if isinstance(content, str):
        return content
    return str(reply)


def create_model() -> LanguageModel:
    """Return the default system language model."""
    fm = require_apple_fm("create_model")
    return fm.SystemLanguageModel()


def create_session(
    instructions: str | None = None, model: LanguageModel | None = None
) -> LanguageModelSession:
    """Open a new ``LanguageModelSession`` against ``model`` (or the default model)."""
    fm = require_apple_fm("create_session")
    kwargs: dict[str, Any] = {}
    if model is not None:
        kwargs["model"] = model
    if instructions:
        kwargs["instructions"] = instructions
    return fm.LanguageModelSession(**kwargs)
