"""Presentation bridge between the core and a rendering surface."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from ollachat.application.services import ConversationStore
from ollachat.application.session import ModelSettings
from ollachat.application.use_cases import RequestOrchestrator
from ollachat.domain.entities import Thread
from ollachat.domain.exceptions import CommandExecutionError, ThreadNotFoundError
from ollachat.domain.services import CommandRunner, FileLister
from ollachat.infrastructure.workspace import EditorStateHolder
from ollachat.presentation.messages import (
    ClearEditor,
    DeleteThread,
    EditorState,
    ExecuteCommand,
    FileEntryPayload,
    Files,
    GetFiles,
    GetThreads,
    InboundMessage,
    NewThread,
    OutboundMessage,
    Response,
    SendMessage,
    SwitchThread,
    UpdateSetting,
    UpdateThreads,
    decode_inbound,
)

logger = logging.getLogger(__name__)

# Sender type: async function delivering one wire envelope to the surface
Sender = Callable[[dict[str, Any]], Awaitable[None]]


class PresentationBridge:
    """Stateless relay between one rendering surface and the core.

    Every inbound envelope is decoded once and dispatched to exactly one
    collaborator; every outbound envelope is a direct serialization of
    that collaborator's result.
    """

    def __init__(
        self,
        send: Sender,
        conversation_store: ConversationStore,
        orchestrator: RequestOrchestrator,
        file_lister: FileLister,
        command_runner: CommandRunner,
        editor_state: EditorStateHolder,
        settings: ModelSettings,
    ) -> None:
        """Initialize the bridge.

        Args:
            send: Delivers an outbound envelope to the surface.
            conversation_store: Thread store.
            orchestrator: Ask orchestrator.
            file_lister: Workspace file enumeration.
            command_runner: Terminal side effect.
            editor_state: Editor state fed by editorState envelopes.
            settings: Runtime-mutable backend settings.
        """
        self._send = send
        self._conversation_store = conversation_store
        self._orchestrator = orchestrator
        self._file_lister = file_lister
        self._command_runner = command_runner
        self._editor_state = editor_state
        self._settings = settings

    async def open(self) -> None:
        """Attach to the store and send the initial thread list."""
        current = await self._conversation_store.current_thread()
        self._conversation_store.subscribe(self.notify_threads)
        await self.notify_threads(self._conversation_store.threads, current)

    def close(self) -> None:
        self._conversation_store.unsubscribe(self.notify_threads)

    async def notify_threads(self, threads: list[Thread], current: Thread) -> None:
        """Send a full thread list refresh."""
        await self._emit(UpdateThreads.from_entities(threads, current))

    async def receive(self, data: str | bytes | dict[str, Any]) -> None:
        """Handle one inbound envelope.

        Malformed envelopes are logged and dropped.

        Args:
            data: JSON text or parsed object from the surface.
        """
        try:
            message = decode_inbound(data)
        except ValidationError as e:
            logger.warning("Dropping invalid envelope: %s", e)
            return

        logger.debug("Received envelope: %s", message.type)
        await self._dispatch(message)

    async def _dispatch(self, message: InboundMessage) -> None:
        if isinstance(message, SendMessage):
            await self._handle_send_message(message)
        elif isinstance(message, GetFiles):
            files = await self._file_lister.list_files()
            await self._emit(
                Files(files=[FileEntryPayload.from_entity(f) for f in files])
            )
        elif isinstance(message, ExecuteCommand):
            await self._handle_execute_command(message)
        elif isinstance(message, NewThread):
            await self._conversation_store.create_thread()
        elif isinstance(message, DeleteThread):
            await self._handle_thread_op(
                self._conversation_store.delete_thread, message.thread_id
            )
        elif isinstance(message, SwitchThread):
            await self._handle_thread_op(
                self._conversation_store.switch_thread, message.thread_id
            )
        elif isinstance(message, GetThreads):
            current = await self._conversation_store.current_thread()
            await self.notify_threads(self._conversation_store.threads, current)
        elif isinstance(message, UpdateSetting):
            await self._handle_update_setting(message)
        elif isinstance(message, EditorState):
            self._editor_state.update(message.to_snapshot())
        elif isinstance(message, ClearEditor):
            self._editor_state.clear()
        else:
            raise AssertionError(f"Unhandled envelope type: {message!r}")

    async def _handle_send_message(self, message: SendMessage) -> None:
        result = await self._orchestrator.ask(
            message.message,
            include_editor_context=message.include_context,
            selected_files=message.selected_files,
        )
        if result is None:
            # Thread is already generating; the surface keeps input disabled
            return
        await self._emit(
            Response(
                message=result.message,
                error=result.error,
                thread_id=result.thread_id,
            )
        )

    async def _handle_execute_command(self, message: ExecuteCommand) -> None:
        try:
            acknowledgement = await self._command_runner.run(message.command)
        except CommandExecutionError as e:
            await self._emit(Response(error=str(e)))
            return
        await self._emit(Response(message=acknowledgement))

    async def _handle_thread_op(
        self, operation: Callable[[str], Awaitable[Any]], thread_id: str
    ) -> None:
        try:
            await operation(thread_id)
        except ThreadNotFoundError as e:
            logger.warning("Ignoring thread operation: %s", e)

    async def _handle_update_setting(self, message: UpdateSetting) -> None:
        try:
            self._settings.update(message.key, message.value)
        except ValueError as e:
            await self._emit(Response(error=str(e)))
            return
        await self._emit(Response(message=f"{message.key} set to: {message.value}"))

    async def _emit(self, envelope: OutboundMessage) -> None:
        await self._send(envelope.to_wire())
