"""Application services."""

from ollachat.application.services.context_assembler import ContextAssembler
from ollachat.application.services.conversation_store import (
    ConversationStore,
    ThreadsListener,
)
from ollachat.application.services.file_context_cache import FileContextCache

__all__ = [
    "ContextAssembler",
    "ConversationStore",
    "FileContextCache",
    "ThreadsListener",
]
