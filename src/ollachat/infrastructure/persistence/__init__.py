"""Persistence infrastructure."""

from ollachat.infrastructure.persistence.conversation_repository import (
    CONVERSATIONS_KEY,
    SQLiteConversationRepository,
)
from ollachat.infrastructure.persistence.database import DatabaseManager
from ollachat.infrastructure.persistence.exceptions import (
    CorruptConversationsError,
    DatabaseError,
    PersistenceError,
)
from ollachat.infrastructure.persistence.models import KeyValueModel

__all__ = [
    "CONVERSATIONS_KEY",
    "CorruptConversationsError",
    "DatabaseError",
    "DatabaseManager",
    "KeyValueModel",
    "PersistenceError",
    "SQLiteConversationRepository",
]
