"""Tests for FileContextCache."""

from ollachat.application.services import FileContextCache
from ollachat.domain.entities import ContextFragment


def _fragment(text: str) -> ContextFragment:
    return ContextFragment(path="a.py", language="python", text=text)


class TestFileContextCache:
    """FileContextCache tests."""

    def test_miss_returns_none(self) -> None:
        cache = FileContextCache()

        assert cache.get("a.py") is None
        assert "a.py" not in cache

    def test_put_then_get(self) -> None:
        cache = FileContextCache()
        fragment = _fragment("x = 1")

        cache.put("a.py", fragment)

        assert cache.get("a.py") is fragment
        assert "a.py" in cache
        assert len(cache) == 1

    def test_put_overwrites(self) -> None:
        """Test that the last write for a path wins."""
        cache = FileContextCache()
        cache.put("a.py", _fragment("old"))
        cache.put("a.py", _fragment("new"))

        assert cache.get("a.py") == _fragment("new")
        assert len(cache) == 1

    def test_clear(self) -> None:
        cache = FileContextCache()
        cache.put("a.py", _fragment("x"))

        cache.clear()

        assert len(cache) == 0
