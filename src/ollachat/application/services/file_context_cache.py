"""File context cache."""

from ollachat.domain.entities import ContextFragment


class FileContextCache:
    """Per-path memo of rendered file fragments.

    Entries are never invalidated: a hit always wins over reading the file
    again, even if the file has changed since. There is no eviction and no
    locking; concurrent fills of the same path are last-write-wins.
    """

    def __init__(self) -> None:
        self._fragments: dict[str, ContextFragment] = {}

    def get(self, path: str) -> ContextFragment | None:
        """Get the cached fragment for a path.

        Args:
            path: Workspace-relative path.

        Returns:
            Cached fragment, or None on a miss.
        """
        return self._fragments.get(path)

    def put(self, path: str, fragment: ContextFragment) -> None:
        """Store a fragment for a path.

        Args:
            path: Workspace-relative path.
            fragment: Fragment read for that path.
        """
        self._fragments[path] = fragment

    def clear(self) -> None:
        self._fragments.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)
