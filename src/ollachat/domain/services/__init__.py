"""Domain services."""

from ollachat.domain.services.protocols import (
    CommandRunner,
    EditorContextSource,
    FileLister,
    FileReader,
    TextGenerator,
)

__all__ = [
    "CommandRunner",
    "EditorContextSource",
    "FileLister",
    "FileReader",
    "TextGenerator",
]
