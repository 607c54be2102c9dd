"""Ask use case."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ollachat.application.services import ContextAssembler, ConversationStore
from ollachat.application.session import Session
from ollachat.domain.entities import ContextOptions
from ollachat.domain.exceptions import ThreadNotFoundError
from ollachat.domain.services import TextGenerator
from ollachat.infrastructure.llm.exceptions import GenerationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AskResult:
    """Outcome of one ask.

    Exactly one of message and error is set.

    Attributes:
        thread_id: Thread the ask was made on.
        message: Assistant reply.
        error: Error text shown instead of a reply.
    """

    thread_id: str
    message: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def wrap_prompt(user_message: str, context: str) -> str:
    """Wrap a user message with its context.

    Args:
        user_message: Raw user message.
        context: Assembled context (may be empty).

    Returns:
        The raw message if the context is empty, otherwise the
        "Context/Question" template.
    """
    if not context:
        return user_message
    return f"Context:\n{context}\n\nQuestion: {user_message}"


class RequestOrchestrator:
    """Coordinates one ask per thread.

    Each thread is either Idle or Generating. An ask on a Generating thread
    is rejected without calling the backend; asks on different threads may
    run concurrently.
    """

    def __init__(
        self,
        session: Session,
        conversation_store: ConversationStore,
        context_assembler: ContextAssembler,
        text_generator: TextGenerator,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            session: Session holding settings and the selected file set.
            conversation_store: Store receiving the exchange.
            context_assembler: Builder for the prompt context.
            text_generator: Backend client.
        """
        self._session = session
        self._conversation_store = conversation_store
        self._context_assembler = context_assembler
        self._text_generator = text_generator
        self._generating: set[str] = set()

    def is_generating(self, thread_id: str) -> bool:
        """Check whether a thread has an ask in flight."""
        return thread_id in self._generating

    async def ask(
        self,
        user_message: str,
        include_editor_context: bool = False,
        selected_files: Sequence[str] = (),
    ) -> AskResult | None:
        """Execute an ask on the current thread.

        Processing flow:
        1. Get the current thread (created if absent), reject if Generating
        2. Replace the selected file set and build the context
        3. Wrap the message with the context
        4. Append the raw user message
        5. Call the backend with the wrapped prompt
        6. Append the reply as an assistant message
        7. On a backend error, return it without appending a reply

        Args:
            user_message: Raw user message.
            include_editor_context: Include the active editor selection.
            selected_files: Files to include as context.

        Returns:
            The result, or None if the thread already has an ask in flight.
        """
        # 1. Check and enter Generating with no await in between
        thread = await self._conversation_store.current_thread()
        if thread.id in self._generating:
            logger.warning("Ask rejected: thread %s is already generating", thread.id)
            return None
        self._generating.add(thread.id)

        try:
            return await self._run(
                thread.id, user_message, include_editor_context, selected_files
            )
        finally:
            self._generating.discard(thread.id)

    async def _run(
        self,
        thread_id: str,
        user_message: str,
        include_editor_context: bool,
        selected_files: Sequence[str],
    ) -> AskResult:
        # 2. Build context
        files = self._session.select_files(list(selected_files))
        context = await self._context_assembler.build_context(
            ContextOptions(
                include_editor_selection=include_editor_context,
                selected_files=tuple(files),
            )
        )

        # 3. Wrap
        prompt = wrap_prompt(user_message, context)

        # 4. Persist the user's input before calling the backend
        try:
            await self._conversation_store.append_message(
                thread_id, user_message, is_user=True
            )
        except ThreadNotFoundError as e:
            logger.warning("Ask aborted: %s", e)
            return AskResult(thread_id=thread_id, error=str(e))

        # 5. Call the backend
        try:
            reply = await self._text_generator.generate(
                prompt, self._session.settings.snapshot()
            )
        except GenerationError as e:
            logger.warning("Ask failed on thread %s: %s", thread_id, e)
            return AskResult(thread_id=thread_id, error=str(e))

        # 6. Append the reply
        try:
            await self._conversation_store.append_message(
                thread_id, reply, is_user=False
            )
        except ThreadNotFoundError:
            logger.warning(
                "Thread %s was deleted while generating; reply not stored", thread_id
            )

        return AskResult(thread_id=thread_id, message=reply)
