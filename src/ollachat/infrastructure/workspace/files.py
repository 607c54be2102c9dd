"""Workspace file access."""

import asyncio
import fnmatch
import logging
import os
from pathlib import Path

from ollachat.domain.entities import ContextFragment, FileEntry
from ollachat.domain.exceptions import FileReadError
from ollachat.infrastructure.workspace.languages import guess_language

logger = logging.getLogger(__name__)


class WorkspaceFileReader:
    """Reads workspace files as context fragments.

    Paths are resolved against the workspace root and must stay inside it.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize the reader.

        Args:
            root: Workspace root directory.
        """
        self._root = Path(root).resolve()

    def resolve(self, path: str) -> Path:
        """Resolve a workspace-relative path.

        Args:
            path: Workspace-relative (or absolute) path.

        Returns:
            Absolute path inside the workspace.

        Raises:
            FileReadError: If the path is invalid or points outside the
                workspace.
        """
        try:
            resolved = (self._root / path).resolve()
        except (OSError, ValueError) as e:
            raise FileReadError(path, f"Invalid path {path!r}: {e}") from e
        if not resolved.is_relative_to(self._root):
            raise FileReadError(path, f"{path} is outside the workspace")
        return resolved

    async def read(self, path: str) -> ContextFragment:
        """Read a file as a context fragment.

        Args:
            path: Workspace-relative path.

        Returns:
            Fragment with the path, language tag and full text.

        Raises:
            FileReadError: If the file cannot be read as UTF-8 text.
        """
        resolved = self.resolve(path)
        try:
            text = await asyncio.to_thread(resolved.read_text, encoding="utf-8")
        except (OSError, ValueError) as e:
            raise FileReadError(path, f"Failed to read file {path}: {e}") from e

        return ContextFragment(path=path, language=guess_language(path), text=text)


class WorkspaceFileLister:
    """Enumerates workspace files for the file picker."""

    def __init__(
        self,
        root: str | Path,
        exclude: list[str] | None = None,
        max_files: int = 5000,
    ) -> None:
        """Initialize the lister.

        Args:
            root: Workspace root directory.
            exclude: fnmatch patterns matched against directory and file names.
            max_files: Maximum number of entries returned.
        """
        self._root = Path(root).resolve()
        self._exclude = list(exclude or [])
        self._max_files = max_files

    async def list_files(self) -> list[FileEntry]:
        """List workspace files.

        Returns:
            Entries sorted by path, at most max_files of them.
        """
        return await asyncio.to_thread(self._scan)

    def _is_excluded(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self._exclude)

    def _scan(self) -> list[FileEntry]:
        entries: list[FileEntry] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            # Prune excluded directories in place
            dirnames[:] = [d for d in dirnames if not self._is_excluded(d)]
            for filename in filenames:
                if self._is_excluded(filename):
                    continue
                relative = (Path(dirpath) / filename).relative_to(self._root)
                entries.append(FileEntry(path=relative.as_posix(), name=filename))

        entries.sort(key=lambda entry: entry.path)
        if len(entries) > self._max_files:
            logger.warning(
                "Workspace has %d files, listing the first %d",
                len(entries),
                self._max_files,
            )
            entries = entries[: self._max_files]
        return entries
