"""Domain repositories."""

from ollachat.domain.repositories.conversation_repository import (
    ConversationRepository,
)

__all__ = ["ConversationRepository"]
