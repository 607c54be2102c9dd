"""In-memory editor context source."""

import logging

from ollachat.domain.entities import EditorSnapshot

logger = logging.getLogger(__name__)


class EditorStateHolder:
    """EditorContextSource fed by the editor integration.

    The editor pushes its active document and selection; the context
    assembler reads the latest snapshot.
    """

    def __init__(self) -> None:
        self._snapshot: EditorSnapshot | None = None

    def active_editor(self) -> EditorSnapshot | None:
        return self._snapshot

    def update(self, snapshot: EditorSnapshot) -> None:
        """Replace the active editor state.

        Args:
            snapshot: New active document and selection.
        """
        self._snapshot = snapshot
        logger.debug(
            "Active editor: %s (%s, selection=%d chars)",
            snapshot.file_name,
            snapshot.language_id,
            len(snapshot.selection),
        )

    def clear(self) -> None:
        """Forget the active editor (no document open)."""
        self._snapshot = None
