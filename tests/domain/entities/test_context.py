"""Tests for context entities."""

from ollachat.domain.entities import ContextFragment, ContextOptions, EditorSnapshot


class TestContextFragment:
    """ContextFragment tests."""

    def test_render(self) -> None:
        """Test the fenced block format."""
        fragment = ContextFragment(path="src/app.py", language="python", text="x = 1")

        assert fragment.render() == "File: src/app.py\n```python\nx = 1\n```"

    def test_render_keeps_text_verbatim(self) -> None:
        fragment = ContextFragment(path="a.txt", language="plaintext", text="a\n\nb\n")

        assert fragment.render() == "File: a.txt\n```plaintext\na\n\nb\n\n```"


class TestEditorSnapshot:
    """EditorSnapshot tests."""

    def test_fragment_uses_selection(self) -> None:
        """Test that a non-empty selection wins over the document."""
        snapshot = EditorSnapshot(
            file_name="/w/main.go",
            language_id="go",
            text="package main\nfunc main() {}",
            selection="func main() {}",
        )

        fragment = snapshot.to_fragment()

        assert fragment.path == "/w/main.go"
        assert fragment.language == "go"
        assert fragment.text == "func main() {}"

    def test_fragment_falls_back_to_document(self) -> None:
        """Test that an empty selection yields the whole document."""
        snapshot = EditorSnapshot(
            file_name="/w/main.go", language_id="go", text="package main"
        )

        assert snapshot.to_fragment().text == "package main"


class TestContextOptions:
    """ContextOptions tests."""

    def test_defaults(self) -> None:
        options = ContextOptions()

        assert options.include_editor_selection is False
        assert options.selected_files == ()
