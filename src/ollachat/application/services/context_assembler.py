"""Context assembler."""

import logging

from ollachat.application.services.file_context_cache import FileContextCache
from ollachat.domain.entities import ContextFragment, ContextOptions
from ollachat.domain.exceptions import FileReadError
from ollachat.domain.services import EditorContextSource, FileReader

logger = logging.getLogger(__name__)


class ContextAssembler:
    """Builds the text block injected ahead of a user prompt.

    The editor fragment comes first, followed by one fragment per selected
    file in selection order. File reads go through the session's
    FileContextCache.
    """

    def __init__(
        self,
        editor_source: EditorContextSource,
        file_reader: FileReader,
        file_cache: FileContextCache,
    ) -> None:
        """Initialize the assembler.

        Args:
            editor_source: Source of the active editor state.
            file_reader: Reader for workspace files.
            file_cache: Cache of rendered file fragments.
        """
        self._editor_source = editor_source
        self._file_reader = file_reader
        self._file_cache = file_cache

    async def build_context(self, options: ContextOptions) -> str:
        """Build the context string for one ask.

        Args:
            options: Whether to include the editor selection, and which files.

        Returns:
            Concatenated fragments, or an empty string if there is nothing
            to include.
        """
        blocks: list[str] = []

        if options.include_editor_selection:
            snapshot = self._editor_source.active_editor()
            if snapshot is not None:
                blocks.append(snapshot.to_fragment().render())

        for path in options.selected_files:
            fragment = await self._get_file_fragment(path)
            if fragment is not None:
                blocks.append(fragment.render())

        return "\n\n".join(blocks)

    async def _get_file_fragment(self, path: str) -> ContextFragment | None:
        """Get a file fragment from the cache, reading the file on a miss.

        Read failures are logged and the fragment is omitted.
        """
        cached = self._file_cache.get(path)
        if cached is not None:
            return cached

        try:
            fragment = await self._file_reader.read(path)
        except FileReadError as e:
            logger.warning("Skipping context file %s: %s", path, e)
            return None

        self._file_cache.put(path, fragment)
        return fragment
