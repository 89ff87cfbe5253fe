"""
Foundation Chat: a single-screen chat over the on-device Apple Foundation Model.

The core is a ``ConversationStore`` (messages, draft, readiness status) and a
``ChatController`` that checks model availability and runs the send-message
lifecycle against a ``LanguageModelSession`` from python-apple-fm-sdk.
"""

from .config import ChatSettings, configure_logging
from .controller import ChatController, ControllerPhase, status_for_availability
from .exceptions import AppleFMSetupError
from .models import ChatMessage, Origin
from .protocols import UnavailableReason
from .store import ChangeKind, ConversationStore, StoreChange

# Note: the Toga view is imported from `foundation_chat.app` when needed.
