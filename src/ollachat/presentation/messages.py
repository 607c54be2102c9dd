"""Presentation message envelopes.

Inbound envelopes come from the rendering surface, outbound envelopes go
back to it. Both directions are closed sets of variants keyed by the
``type`` field and use camelCase field names on the wire.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel

from ollachat.domain.entities import EditorSnapshot, FileEntry, Message, Thread


class Envelope(BaseModel):
    """Base model for wire envelopes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Inbound (UI -> core) ---


class SendMessage(Envelope):
    type: Literal["sendMessage"] = "sendMessage"
    message: str
    include_context: bool = False
    selected_files: list[str] = Field(default_factory=list)


class GetFiles(Envelope):
    type: Literal["getFiles"] = "getFiles"


class ExecuteCommand(Envelope):
    type: Literal["executeCommand"] = "executeCommand"
    command: str


class NewThread(Envelope):
    type: Literal["newThread"] = "newThread"


class DeleteThread(Envelope):
    type: Literal["deleteThread"] = "deleteThread"
    thread_id: str


class SwitchThread(Envelope):
    type: Literal["switchThread"] = "switchThread"
    thread_id: str


class GetThreads(Envelope):
    type: Literal["getThreads"] = "getThreads"


class UpdateSetting(Envelope):
    type: Literal["updateSetting"] = "updateSetting"
    key: str
    value: str


class EditorState(Envelope):
    """Active editor report from the editor integration."""

    type: Literal["editorState"] = "editorState"
    file_name: str
    language_id: str = "plaintext"
    text: str
    selection: str = ""

    def to_snapshot(self) -> EditorSnapshot:
        return EditorSnapshot(
            file_name=self.file_name,
            language_id=self.language_id,
            text=self.text,
            selection=self.selection,
        )


class ClearEditor(Envelope):
    type: Literal["clearEditor"] = "clearEditor"


InboundMessage = Annotated[
    Union[
        SendMessage,
        GetFiles,
        ExecuteCommand,
        NewThread,
        DeleteThread,
        SwitchThread,
        GetThreads,
        UpdateSetting,
        EditorState,
        ClearEditor,
    ],
    Field(discriminator="type"),
]

_INBOUND_ADAPTER: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def decode_inbound(data: str | bytes | dict[str, Any]) -> InboundMessage:
    """Decode an inbound envelope.

    Args:
        data: JSON text or an already parsed object.

    Returns:
        The matching inbound variant.

    Raises:
        pydantic.ValidationError: If the envelope is malformed or its type
            is unknown.
    """
    if isinstance(data, (str, bytes)):
        return _INBOUND_ADAPTER.validate_json(data)
    return _INBOUND_ADAPTER.validate_python(data)


# --- Outbound (core -> UI) ---


class MessagePayload(Envelope):
    content: str
    is_user: bool
    timestamp: datetime

    @classmethod
    def from_entity(cls, message: Message) -> "MessagePayload":
        return cls(
            content=message.content,
            is_user=message.is_user,
            timestamp=message.timestamp,
        )


class ThreadPayload(Envelope):
    id: str
    title: str
    messages: list[MessagePayload]
    created_at: datetime

    @classmethod
    def from_entity(cls, thread: Thread) -> "ThreadPayload":
        return cls(
            id=thread.id,
            title=thread.title,
            messages=[MessagePayload.from_entity(m) for m in thread.messages],
            created_at=thread.created_at,
        )


class FileEntryPayload(Envelope):
    path: str
    name: str

    @classmethod
    def from_entity(cls, entry: FileEntry) -> "FileEntryPayload":
        return cls(path=entry.path, name=entry.name)


class Response(Envelope):
    """Result of an ask or a command: exactly one of message and error."""

    type: Literal["response"] = "response"
    message: str | None = None
    error: str | None = None
    thread_id: str | None = None

    @model_validator(mode="after")
    def _check_exactly_one(self) -> "Response":
        if (self.message is None) == (self.error is None):
            raise ValueError("Exactly one of message and error must be set")
        return self


class Files(Envelope):
    type: Literal["files"] = "files"
    files: list[FileEntryPayload]


class UpdateThreads(Envelope):
    type: Literal["updateThreads"] = "updateThreads"
    threads: list[ThreadPayload]
    current_thread: ThreadPayload

    @classmethod
    def from_entities(cls, threads: list[Thread], current: Thread) -> "UpdateThreads":
        return cls(
            threads=[ThreadPayload.from_entity(t) for t in threads],
            current_thread=ThreadPayload.from_entity(current),
        )


OutboundMessage = Union[Response, Files, UpdateThreads]
