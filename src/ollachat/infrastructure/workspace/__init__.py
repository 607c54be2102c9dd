"""Workspace and editor integration."""

from ollachat.infrastructure.workspace.editor import EditorStateHolder
from ollachat.infrastructure.workspace.files import (
    WorkspaceFileLister,
    WorkspaceFileReader,
)
from ollachat.infrastructure.workspace.languages import guess_language

__all__ = [
    "EditorStateHolder",
    "WorkspaceFileLister",
    "WorkspaceFileReader",
    "guess_language",
]
