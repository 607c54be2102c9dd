"""Context entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContextFragment:
    """A fenced block of source text injected ahead of a question.

    Attributes:
        path: File path shown in the header.
        language: Language tag of the fence.
        text: Full text of the block.
    """

    path: str
    language: str
    text: str

    def render(self) -> str:
        """Render the fragment as a fenced block with a path header."""
        return f"File: {self.path}\n```{self.language}\n{self.text}\n```"


@dataclass(frozen=True)
class EditorSnapshot:
    """State of the active editor.

    Attributes:
        file_name: Path of the document shown in the editor.
        language_id: Language identifier of the document.
        text: Full document text.
        selection: Selected text (empty when nothing is selected).
    """

    file_name: str
    language_id: str
    text: str
    selection: str = ""

    def to_fragment(self) -> ContextFragment:
        """Build a fragment from the selection, or the whole document."""
        body = self.selection if self.selection else self.text
        return ContextFragment(
            path=self.file_name, language=self.language_id, text=body
        )


@dataclass(frozen=True)
class ContextOptions:
    """Options for building the context of one ask.

    Attributes:
        include_editor_selection: Include the active editor's selection.
        selected_files: Workspace-relative paths to include.
    """

    include_editor_selection: bool = False
    selected_files: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FileEntry:
    """Workspace file listing entry."""

    path: str
    name: str
