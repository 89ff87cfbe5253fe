"""
Tests for foundation_chat.protocols and foundation_chat.exceptions.

Covers:
  - UnavailableReason.classify for SDK enums, strings and None
  - reply_text extraction
  - create_model/create_session against a stand-in apple_fm_sdk module
  - AppleFMSetupError when the SDK is missing
"""

import enum
import sys
from unittest.mock import MagicMock, patch

import pytest

from foundation_chat.exceptions import AppleFMSetupError, require_apple_fm
from foundation_chat.protocols import (
    LanguageModelSession,
    UnavailableReason,
    create_model,
    create_session,
    reply_text,
)


class SystemLanguageModelUnavailableReason(enum.Enum):
    APPLE_INTELLIGENCE_NOT_ENABLED = 0
    DEVICE_NOT_ELIGIBLE = 1
    MODEL_NOT_READY = 2
    UNKNOWN = 3


# ========================================================================
# UnavailableReason.classify
# ========================================================================


class TestClassify:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (SystemLanguageModelUnavailableReason.DEVICE_NOT_ELIGIBLE, "DEVICE_NOT_ELIGIBLE"),
            (
                SystemLanguageModelUnavailableReason.APPLE_INTELLIGENCE_NOT_ENABLED,
                "APPLE_INTELLIGENCE_NOT_ENABLED",
            ),
            (SystemLanguageModelUnavailableReason.MODEL_NOT_READY, "MODEL_NOT_READY"),
            (SystemLanguageModelUnavailableReason.UNKNOWN, "UNKNOWN"),
            ("deviceNotEligible", "DEVICE_NOT_ELIGIBLE"),
            ("featureNotEnabled", "APPLE_INTELLIGENCE_NOT_ENABLED"),
            ("model not ready", "MODEL_NOT_READY"),
            ("SystemLanguageModelUnavailableReason.MODEL_NOT_READY", "MODEL_NOT_READY"),
            ("rate limited", "UNKNOWN"),
            (None, "UNKNOWN"),
        ],
    )
    def test_classify(self, raw, expected):
        assert UnavailableReason.classify(raw) is UnavailableReason[expected]

    def test_classify_passes_through_members(self):
        reason = UnavailableReason.MODEL_NOT_READY
        assert UnavailableReason.classify(reason) is reason


# ========================================================================
# reply_text
# ========================================================================


class TestReplyText:
    def test_plain_string(self):
        assert reply_text("hello") == "hello"

    def test_content_attribute(self):
        reply = MagicMock()
        reply.content = "from content"
        assert reply_text(reply) == "from content"

    def test_falls_back_to_str(self):
        class Reply:
            def __str__(self):
                return "stringified"

        assert reply_text(Reply()) == "stringified"


# ========================================================================
# SDK factories
# ========================================================================


class TestFactories:
    def test_missing_sdk_raises_setup_error(self):
        with patch.dict(sys.modules, {"apple_fm_sdk": None}):
            with pytest.raises(AppleFMSetupError, match="apple-fm-sdk"):
                require_apple_fm("test")
            with pytest.raises(AppleFMSetupError):
                create_model()
            with pytest.raises(AppleFMSetupError):
                create_session()

    def test_create_model_uses_system_model(self):
        fake_fm = MagicMock()
        with patch.dict(sys.modules, {"apple_fm_sdk": fake_fm}):
            model = create_model()

        fake_fm.SystemLanguageModel.assert_called_once_with()
        assert model is fake_fm.SystemLanguageModel.return_value

    def test_create_session_passes_model_and_instructions(self):
        fake_fm = MagicMock()
        model = MagicMock()
        with patch.dict(sys.modules, {"apple_fm_sdk": fake_fm}):
            session = create_session(instructions="Be brief.", model=model)

        fake_fm.LanguageModelSession.assert_called_once_with(model=model, instructions="Be brief.")
        assert session is fake_fm.LanguageModelSession.return_value

    def test_create_session_defaults(self):
        fake_fm = MagicMock()
        with patch.dict(sys.modules, {"apple_fm_sdk": fake_fm}):
            create_session()

        fake_fm.LanguageModelSession.assert_called_once_with()

    def test_session_protocol_is_structural(self):
        class Session:
            async def respond(self, prompt):
                return prompt

        assert isinstance(Session(), LanguageModelSession)
