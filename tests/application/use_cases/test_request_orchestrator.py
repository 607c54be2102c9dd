"""Tests for RequestOrchestrator."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from ollachat.application.services import (
    ContextAssembler,
    ConversationStore,
    FileContextCache,
)
from ollachat.application.session import ModelSettings, Session
from ollachat.application.use_cases import RequestOrchestrator, wrap_prompt
from ollachat.config import ModelConfig
from ollachat.domain.entities import ContextFragment, ContextOptions
from ollachat.infrastructure.llm import BackendUnreachableError, GenerationClient


@pytest.fixture
def repository() -> AsyncMock:
    mock = AsyncMock()
    mock.load.return_value = []
    return mock


@pytest.fixture
async def store(repository: AsyncMock) -> ConversationStore:
    store = ConversationStore(repository)
    await store.load()
    return store


@pytest.fixture
def session() -> Session:
    return Session(settings=ModelSettings(ModelConfig(model_name="codellama")))


@pytest.fixture
def context_assembler() -> AsyncMock:
    mock = AsyncMock(spec=ContextAssembler)
    mock.build_context.return_value = ""
    return mock


@pytest.fixture
def text_generator() -> AsyncMock:
    mock = AsyncMock()
    mock.generate.return_value = "<p>Use sorted().</p>"
    return mock


@pytest.fixture
def orchestrator(
    session: Session,
    store: ConversationStore,
    context_assembler: AsyncMock,
    text_generator: AsyncMock,
) -> RequestOrchestrator:
    return RequestOrchestrator(
        session=session,
        conversation_store=store,
        context_assembler=context_assembler,
        text_generator=text_generator,
    )


class TestWrapPrompt:
    """wrap_prompt tests."""

    def test_without_context(self) -> None:
        assert wrap_prompt("What is this?", "") == "What is this?"

    def test_with_context(self) -> None:
        result = wrap_prompt("What is this?", "File: a.py\n```python\nx\n```")

        assert result == (
            "Context:\nFile: a.py\n```python\nx\n```\n\nQuestion: What is this?"
        )


class TestAsk:
    """ask tests."""

    async def test_successful_exchange(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        """Test that one ask appends exactly one user and one assistant message."""
        result = await orchestrator.ask("How do I sort a list?")

        assert result is not None
        assert result.ok
        assert result.message == "<p>Use sorted().</p>"
        thread = store.get_thread(result.thread_id)
        assert [(m.content, m.is_user) for m in thread.messages] == [
            ("How do I sort a list?", True),
            ("<p>Use sorted().</p>", False),
        ]
        assert thread.title == "How do I sort a list?"
        text_generator.generate.assert_awaited_once()

    async def test_creates_thread_when_none(
        self, orchestrator: RequestOrchestrator, store: ConversationStore
    ) -> None:
        result = await orchestrator.ask("Hello")

        assert result is not None
        assert store.current_thread_id == result.thread_id

    async def test_uses_settings_snapshot(
        self,
        orchestrator: RequestOrchestrator,
        session: Session,
        text_generator: AsyncMock,
    ) -> None:
        session.settings.update("endpointBaseUrl", "http://gpu-box:11434")

        await orchestrator.ask("Hello")

        model_config = text_generator.generate.await_args.args[1]
        assert model_config.model_name == "codellama"
        assert model_config.endpoint_base_url == "http://gpu-box:11434"

    async def test_context_wrapped_but_raw_message_stored(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        context_assembler: AsyncMock,
        text_generator: AsyncMock,
    ) -> None:
        """Test that the backend sees the wrapped prompt and history the raw one."""
        context = ContextFragment("a.py", "python", "x = 1").render()
        context_assembler.build_context.return_value = context

        result = await orchestrator.ask(
            "Explain", include_editor_context=True, selected_files=["a.py"]
        )

        prompt = text_generator.generate.await_args.args[0]
        assert prompt == f"Context:\n{context}\n\nQuestion: Explain"
        context_assembler.build_context.assert_awaited_once_with(
            ContextOptions(include_editor_selection=True, selected_files=("a.py",))
        )
        assert result is not None
        thread = store.get_thread(result.thread_id)
        assert thread.messages[0].content == "Explain"

    async def test_selected_files_replace_session_selection(
        self, orchestrator: RequestOrchestrator, session: Session
    ) -> None:
        await orchestrator.ask("First", selected_files=["a.py", "b.py"])
        await orchestrator.ask("Second", selected_files=["c.py"])

        assert session.selected_files == ["c.py"]

    async def test_backend_error(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        """Test that a failed call keeps the user message and adds no reply."""
        text_generator.generate.side_effect = BackendUnreachableError(
            "Failed to communicate with backend: connection refused"
        )

        result = await orchestrator.ask("Hello")

        assert result is not None
        assert not result.ok
        assert result.error == "Failed to communicate with backend: connection refused"
        thread = store.get_thread(result.thread_id)
        assert [m.content for m in thread.messages] == ["Hello"]
        assert thread.title == "New Chat"
        assert not orchestrator.is_generating(result.thread_id)

    async def test_reply_lands_on_original_thread_after_switch(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        original = await store.create_thread()
        release = asyncio.Event()

        async def slow_generate(prompt: str, model_config: ModelConfig) -> str:
            await release.wait()
            return "late answer"

        text_generator.generate.side_effect = slow_generate

        task = asyncio.create_task(orchestrator.ask("Question"))
        await asyncio.sleep(0)
        other = await store.create_thread()
        release.set()
        result = await task

        assert result is not None
        assert result.thread_id == original.id
        assert [m.content for m in original.messages] == ["Question", "late answer"]
        assert other.messages == []
        assert store.current_thread_id == other.id

    async def test_thread_deleted_while_generating(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        original = await store.create_thread()
        release = asyncio.Event()

        async def slow_generate(prompt: str, model_config: ModelConfig) -> str:
            await release.wait()
            return "orphaned answer"

        text_generator.generate.side_effect = slow_generate

        task = asyncio.create_task(orchestrator.ask("Question"))
        await asyncio.sleep(0)
        await store.delete_thread(original.id)
        release.set()
        result = await task

        assert result is not None
        assert result.message == "orphaned answer"
        assert all(t.id != original.id for t in store.threads)


class TestConcurrentAsks:
    """Generating-state tests."""

    async def test_second_ask_on_same_thread_rejected(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        thread = await store.create_thread()
        release = asyncio.Event()

        async def slow_generate(prompt: str, model_config: ModelConfig) -> str:
            await release.wait()
            return "answer"

        text_generator.generate.side_effect = slow_generate

        first = asyncio.create_task(orchestrator.ask("One"))
        await asyncio.sleep(0)
        assert orchestrator.is_generating(thread.id)

        second = await orchestrator.ask("Two")

        release.set()
        await first
        assert second is None
        assert text_generator.generate.await_count == 1
        assert [m.content for m in thread.messages] == ["One", "answer"]
        assert not orchestrator.is_generating(thread.id)

    async def test_asks_on_different_threads_run_concurrently(
        self,
        orchestrator: RequestOrchestrator,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        first_thread = await store.create_thread()
        release = asyncio.Event()

        async def slow_generate(prompt: str, model_config: ModelConfig) -> str:
            await release.wait()
            return f"re: {prompt}"

        text_generator.generate.side_effect = slow_generate

        first = asyncio.create_task(orchestrator.ask("One"))
        await asyncio.sleep(0)
        second_thread = await store.create_thread()
        second = asyncio.create_task(orchestrator.ask("Two"))
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(first, second)

        assert all(result is not None for result in results)
        assert [m.content for m in first_thread.messages] == ["One", "re: One"]
        assert [m.content for m in second_thread.messages] == ["Two", "re: Two"]


class TestAskWithRealAssembler:
    """ask with a real ContextAssembler."""

    async def test_file_read_once_across_asks(
        self,
        session: Session,
        store: ConversationStore,
        text_generator: AsyncMock,
    ) -> None:
        file_reader = AsyncMock()
        file_reader.read.return_value = ContextFragment("a.py", "python", "x = 1")
        editor_source = Mock()
        cache = FileContextCache()
        orchestrator = RequestOrchestrator(
            session=session,
            conversation_store=store,
            context_assembler=ContextAssembler(editor_source, file_reader, cache),
            text_generator=text_generator,
        )

        await orchestrator.ask("One", selected_files=["a.py"])
        await orchestrator.ask("Two", selected_files=["a.py"])

        assert file_reader.read.await_count == 1
        prompt = text_generator.generate.await_args.args[0]
        assert prompt.startswith("Context:\nFile: a.py\n")


class TestAskWithRealClient:
    """ask with a real GenerationClient."""

    async def test_invalid_endpoint_setting_becomes_error(
        self,
        session: Session,
        store: ConversationStore,
        context_assembler: AsyncMock,
    ) -> None:
        """Test that a bad endpoint written at runtime yields an inline error."""
        orchestrator = RequestOrchestrator(
            session=session,
            conversation_store=store,
            context_assembler=context_assembler,
            text_generator=GenerationClient(),
        )
        session.settings.update("endpointBaseUrl", "http://localhost:notaport")

        result = await orchestrator.ask("hi")

        assert result is not None
        assert result.message is None
        assert result.error is not None
        assert result.error.startswith("Failed to communicate with backend:")
        thread = store.get_thread(result.thread_id)
        assert [m.content for m in thread.messages] == ["hi"]
        assert not orchestrator.is_generating(result.thread_id)
