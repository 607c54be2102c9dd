"""Domain service protocols."""

from typing import Protocol

from ollachat.config import ModelConfig
from ollachat.domain.entities import ContextFragment, EditorSnapshot, FileEntry


class EditorContextSource(Protocol):
    """Active editor abstraction (editor-independent).

    The editor integration only acts as a data source: the core never
    writes to it.
    """

    def active_editor(self) -> EditorSnapshot | None:
        """Get the active editor state.

        Returns:
            Snapshot of the active document, or None if no editor is open.
        """
        ...


class FileReader(Protocol):
    """Workspace file reader abstraction."""

    async def read(self, path: str) -> ContextFragment:
        """Read a workspace file as a context fragment.

        Args:
            path: Workspace-relative path.

        Returns:
            Fragment holding the path, its language tag and full text.

        Raises:
            FileReadError: If the file cannot be read.
        """
        ...


class FileLister(Protocol):
    """Workspace file enumeration abstraction."""

    async def list_files(self) -> list[FileEntry]:
        """List workspace files.

        Returns:
            File entries sorted by path.
        """
        ...


class TextGenerator(Protocol):
    """Text generation abstraction.

    This protocol defines the interface for a single blocking
    request/response call to a text-generation backend.
    """

    async def generate(self, prompt: str, model_config: ModelConfig) -> str:
        """Generate a completion.

        Args:
            prompt: User prompt (possibly wrapped with context).
            model_config: Backend endpoint and model name.

        Returns:
            Generated text.

        Raises:
            GenerationError: If the backend call fails.
        """
        ...


class CommandRunner(Protocol):
    """Terminal command abstraction (fire-and-forget)."""

    async def run(self, command: str) -> str:
        """Start a command.

        Args:
            command: Shell command line.

        Returns:
            Acknowledgement text.

        Raises:
            CommandExecutionError: If the command cannot be started.
        """
        ...
