"""Conversation store."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ollachat.domain.entities import Message, Thread
from ollachat.domain.exceptions import ThreadNotFoundError
from ollachat.domain.repositories import ConversationRepository

logger = logging.getLogger(__name__)

# Listener type: async function receiving (threads, current_thread)
ThreadsListener = Callable[[list[Thread], Thread], Awaitable[None]]


class ConversationStore:
    """Owns the chat threads and the active-thread pointer.

    Threads are kept newest-first. The whole collection is written to the
    repository after every mutation; a failed write is logged and the
    in-memory state stays authoritative.
    """

    def __init__(self, repository: ConversationRepository) -> None:
        """Initialize the store.

        Args:
            repository: Durable storage for the thread collection.
        """
        self._repository = repository
        self._threads: list[Thread] = []
        self._current: Thread | None = None
        self._listeners: list[ThreadsListener] = []
        self._save_lock = asyncio.Lock()

    async def load(self) -> None:
        """Load the thread collection from the repository.

        The newest stored thread becomes current. If nothing is stored,
        no thread is current until one is created.
        """
        self._threads = await self._repository.load()
        self._current = self._threads[0] if self._threads else None
        logger.info("Loaded %d conversation threads", len(self._threads))

    @property
    def threads(self) -> list[Thread]:
        """Threads, newest first."""
        return list(self._threads)

    @property
    def current_thread_id(self) -> str | None:
        return self._current.id if self._current is not None else None

    def subscribe(self, listener: ThreadsListener) -> None:
        """Register a listener called after the thread list changes."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: ThreadsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_thread(self, thread_id: str) -> Thread:
        """Find a thread by ID.

        Args:
            thread_id: Thread ID.

        Returns:
            The thread.

        Raises:
            ThreadNotFoundError: If no thread has that ID.
        """
        for thread in self._threads:
            if thread.id == thread_id:
                return thread
        raise ThreadNotFoundError(thread_id)

    async def create_thread(self) -> Thread:
        """Create a thread and make it current.

        Returns:
            The new, empty thread.
        """
        thread = Thread()
        self._threads.insert(0, thread)
        self._current = thread
        logger.debug("Created thread %s", thread.id)
        await self._persist()
        await self._notify()
        return thread

    async def current_thread(self) -> Thread:
        """Get the active thread, creating one if none exists."""
        if self._current is None:
            return await self.create_thread()
        return self._current

    async def switch_thread(self, thread_id: str) -> Thread:
        """Make an existing thread current.

        Args:
            thread_id: Thread ID.

        Returns:
            The thread that is now current.

        Raises:
            ThreadNotFoundError: If no thread has that ID.
        """
        thread = self.get_thread(thread_id)
        self._current = thread
        await self._notify()
        return thread

    async def append_message(
        self, thread_id: str, content: str, is_user: bool
    ) -> None:
        """Append a message to a thread and persist the collection.

        When the thread reaches exactly two messages, its title is derived
        from the first message.

        Args:
            thread_id: Target thread ID.
            content: Message content.
            is_user: True for a user message, False for an assistant message.

        Raises:
            ThreadNotFoundError: If no thread has that ID.
        """
        try:
            thread = self.get_thread(thread_id)
        except ThreadNotFoundError:
            logger.warning("Cannot append message: thread %s not found", thread_id)
            raise

        thread.append(Message(content=content, is_user=is_user))
        await self._persist()

    async def delete_thread(self, thread_id: str) -> None:
        """Delete a thread.

        If the deleted thread was current, the first remaining thread becomes
        current, or a new thread is created when none remain.

        Args:
            thread_id: Thread ID.

        Raises:
            ThreadNotFoundError: If no thread has that ID.
        """
        thread = self.get_thread(thread_id)
        self._threads.remove(thread)
        logger.debug("Deleted thread %s", thread_id)

        if self._current is thread:
            if self._threads:
                self._current = self._threads[0]
            else:
                # create_thread persists and notifies
                await self.create_thread()
                return

        await self._persist()
        await self._notify()

    async def _persist(self) -> None:
        """Write the whole collection; failures are logged, not raised."""
        async with self._save_lock:
            try:
                await self._repository.save(list(self._threads))
            except Exception:
                logger.exception("Error saving conversation threads")

    async def _notify(self) -> None:
        current = await self.current_thread()
        threads = self.threads
        for listener in list(self._listeners):
            try:
                await listener(threads, current)
            except Exception:
                logger.exception("Error in thread list listener")
