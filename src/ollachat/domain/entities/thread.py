"""Thread and message entities."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_THREAD_TITLE = "New Chat"
TITLE_MAX_LENGTH = 50
TITLE_ELLIPSIS = "..."


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """Chat message entity.

    Attributes:
        content: Message body. Assistant content is backend markup.
        is_user: True for the user turn, False for the assistant turn.
        timestamp: When the message was created.
    """

    content: str
    is_user: bool
    timestamp: datetime = field(default_factory=_now)


@dataclass
class Thread:
    """Chat thread entity.

    Attributes:
        id: Opaque unique identifier.
        title: Display label, derived once from the first message.
        messages: Messages in insertion order.
        created_at: When the thread was created.
    """

    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    title: str = DEFAULT_THREAD_TITLE
    messages: list[Message] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)

    def append(self, message: Message) -> None:
        """Append a message and derive the title once two messages exist.

        Args:
            message: The message to append.
        """
        self.messages.append(message)
        if len(self.messages) == 2:
            self.title = derive_title(self.messages[0].content)


def derive_title(content: str) -> str:
    """Derive a thread title from the first line of a message.

    Args:
        content: Message content.

    Returns:
        The first line, truncated to 50 characters with a trailing "..."
        when it is longer.
    """
    first_line = content.split("\n", 1)[0]
    if len(first_line) > TITLE_MAX_LENGTH:
        return first_line[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return first_line
