from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("foundation_chat")

ENV_INSTRUCTIONS = "FOUNDATION_CHAT_INSTRUCTIONS"
ENV_LOG_LEVEL = "FOUNDATION_CHAT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "warning"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class ChatSettings:
    """Runtime settings shared by the CLI and the desktop view."""

    instructions: str | None = None
    log_level: str | int = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ChatSettings:
        """Load settings from ``FOUNDATION_CHAT_*`` variables with safe defaults."""
        env = os.environ if environ is None else environ
        instructions = (env.get(ENV_INSTRUCTIONS) or "").strip() or None
        log_level = (env.get(ENV_LOG_LEVEL) or "").strip() or DEFAULT_LOG_LEVEL
        return cls(instructions=instructions, log_level=log_level)

    def merged(
        self, *, instructions: str | None = None, log_level: str | None = None
    ) -> ChatSettings:
        """Return a copy with explicitly passed values taking precedence."""
        return ChatSettings(
            instructions=instructions if instructions is not None else self.instructions,
            log_level=log_level if log_level is not None else self.log_level,
        )


def resolve_log_level(level: str | int, fallback: int = logging.WARNING) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        if level.isdigit():
            return int(level)
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, int):
            return resolved
    logger.warning(
        "[FoundationChat] Unsupported log level '%s'; falling back to %s.",
        level,
        logging.getLevelName(fallback),
    )
    return fallback


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> int:
    """Install basic logging at ``level`` and return the resolved numeric level."""
    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("foundation_chat").setLevel(resolved)
    return resolved
