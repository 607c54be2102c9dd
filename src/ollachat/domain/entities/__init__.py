"""Domain entities."""

from ollachat.domain.entities.context import (
    ContextFragment,
    ContextOptions,
    EditorSnapshot,
    FileEntry,
)
from ollachat.domain.entities.thread import (
    DEFAULT_THREAD_TITLE,
    Message,
    Thread,
    derive_title,
)

__all__ = [
    "ContextFragment",
    "ContextOptions",
    "DEFAULT_THREAD_TITLE",
    "EditorSnapshot",
    "FileEntry",
    "Message",
    "Thread",
    "derive_title",
]
