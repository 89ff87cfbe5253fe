"""
Setup errors raised when the Apple Foundation Models stack cannot be used.
"""

from __future__ import annotations

import importlib
from types import ModuleType

INSTALL_GUIDE_URL = "https://github.com/apple/python-apple-fm-sdk"


class AppleFMSetupError(RuntimeError):
    """The Apple FM SDK is missing or the on-device model cannot be used."""


def require_apple_fm(context: str = "foundation-chat") -> ModuleType:
    """Import ``apple_fm_sdk`` or raise an actionable setup error."""
    try:
        return importlib.import_module("apple_fm_sdk")
    except ImportError as exc:
        raise AppleFMSetupError(
            f"[FoundationChat] {context} requires 'apple-fm-sdk', which is not installed.\n"
            "The Apple Foundation Models SDK must be installed manually on macOS 26+.\n"
            f"Please follow the installation guide: {INSTALL_GUIDE_URL}"
        ) from exc

