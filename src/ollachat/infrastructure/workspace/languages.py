"""Language identifiers for context fences."""

from pathlib import PurePath

DEFAULT_LANGUAGE = "plaintext"

# File extension -> language identifier
_EXTENSION_LANGUAGES = {
    ".bat": "bat",
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".css": "css",
    ".go": "go",
    ".h": "c",
    ".hpp": "cpp",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascriptreact",
    ".kt": "kotlin",
    ".lua": "lua",
    ".md": "markdown",
    ".php": "php",
    ".ps1": "powershell",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".scss": "scss",
    ".sh": "shellscript",
    ".sql": "sql",
    ".swift": "swift",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".txt": "plaintext",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
}

# Well-known file names without a telling extension
_FILENAME_LANGUAGES = {
    "Dockerfile": "dockerfile",
    "Makefile": "makefile",
}


def guess_language(path: str) -> str:
    """Guess the language identifier of a file from its name.

    Args:
        path: File path.

    Returns:
        Language identifier, "plaintext" when unknown.
    """
    pure = PurePath(path)
    if pure.name in _FILENAME_LANGUAGES:
        return _FILENAME_LANGUAGES[pure.name]
    return _EXTENSION_LANGUAGES.get(pure.suffix.lower(), DEFAULT_LANGUAGE)
