"""Chat session management.

Module structure:
- models.py: transcript message and lifecycle enums
- client.py: handle binding the model client to the current settings
- state.py: the session state machine
"""

from .client import ClientHandle, ProviderFactory, ollama_provider_for
from .models import Message, Role, SessionState, SubmitMode
from .state import ChatSession, SessionListener

__all__ = [
    "ChatSession",
    "ClientHandle",
    "Message",
    "ProviderFactory",
    "Role",
    "SessionListener",
    "SessionState",
    "SubmitMode",
    "ollama_provider_for",
]
