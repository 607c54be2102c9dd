"""Tests for Thread and Message entities."""

from datetime import datetime, timezone

import pytest

from ollachat.domain.entities import Message, Thread
from ollachat.domain.entities.thread import DEFAULT_THREAD_TITLE, derive_title


class TestMessage:
    """Message entity tests."""

    def test_create(self) -> None:
        """Test message creation."""
        timestamp = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        message = Message(content="Hello", is_user=True, timestamp=timestamp)

        assert message.content == "Hello"
        assert message.is_user is True
        assert message.timestamp == timestamp

    def test_default_timestamp_is_utc(self) -> None:
        """Test that the default timestamp is timezone-aware."""
        message = Message(content="Hello", is_user=False)

        assert message.timestamp.tzinfo is not None

    def test_immutable(self) -> None:
        """Test that Message is immutable."""
        message = Message(content="Hello", is_user=True)

        with pytest.raises(AttributeError):
            message.content = "Changed"  # type: ignore[misc]


class TestThread:
    """Thread entity tests."""

    def test_new_thread_defaults(self) -> None:
        """Test a freshly created thread."""
        thread = Thread()

        assert thread.title == DEFAULT_THREAD_TITLE
        assert thread.messages == []
        assert thread.id

    def test_ids_are_unique(self) -> None:
        """Test that every thread gets its own ID."""
        assert Thread().id != Thread().id

    def test_title_unchanged_after_first_message(self) -> None:
        """Test that one message does not set the title."""
        thread = Thread()
        thread.append(Message(content="How do I sort a list?", is_user=True))

        assert thread.title == DEFAULT_THREAD_TITLE

    def test_title_derived_at_second_message(self) -> None:
        """Test that the title comes from the first message at two messages."""
        thread = Thread()
        thread.append(Message(content="How do I sort a list?", is_user=True))
        thread.append(Message(content="<p>Use sorted().</p>", is_user=False))

        assert thread.title == "How do I sort a list?"

    def test_title_not_rederived_later(self) -> None:
        """Test that later messages never change the title."""
        thread = Thread()
        thread.append(Message(content="First question", is_user=True))
        thread.append(Message(content="Answer", is_user=False))
        thread.append(Message(content="Second question", is_user=True))
        thread.append(Message(content="Answer 2", is_user=False))

        assert thread.title == "First question"


class TestDeriveTitle:
    """derive_title tests."""

    def test_short_line(self) -> None:
        assert derive_title("Hello") == "Hello"

    def test_uses_first_line_only(self) -> None:
        assert derive_title("Line one\nLine two") == "Line one"

    def test_exactly_fifty_characters(self) -> None:
        """Test that a 50 character line is kept as-is."""
        content = "a" * 50
        assert derive_title(content) == content

    def test_long_line_truncated(self) -> None:
        """Test that a longer line is cut to 50 characters plus an ellipsis."""
        content = "b" * 80
        assert derive_title(content) == "b" * 50 + "..."

    def test_empty_first_line(self) -> None:
        assert derive_title("\nsecond") == ""
