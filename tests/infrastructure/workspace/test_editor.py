"""Tests for EditorStateHolder."""

from ollachat.domain.entities import EditorSnapshot
from ollachat.infrastructure.workspace import EditorStateHolder


class TestEditorStateHolder:
    """EditorStateHolder tests."""

    def test_initially_empty(self) -> None:
        assert EditorStateHolder().active_editor() is None

    def test_update_and_clear(self) -> None:
        holder = EditorStateHolder()
        snapshot = EditorSnapshot(
            file_name="main.py", language_id="python", text="x", selection="x"
        )

        holder.update(snapshot)
        assert holder.active_editor() is snapshot

        holder.clear()
        assert holder.active_editor() is None
