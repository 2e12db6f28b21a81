"""Host runtime integration module."""

from .client import HostClient, HostError
from .models import (
    ConversationTurn,
    Message,
    MessagePart,
    ModelRef,
    ProviderCatalogEntry,
    SessionInfo,
)

__all__ = [
    "ConversationTurn",
    "HostClient",
    "HostError",
    "Message",
    "MessagePart",
    "ModelRef",
    "ProviderCatalogEntry",
    "SessionInfo",
]
