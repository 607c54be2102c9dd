"""Generation backend integration."""

from ollachat.infrastructure.llm.client import GenerationClient
from ollachat.infrastructure.llm.exceptions import (
    BackendUnreachableError,
    GenerationError,
    MalformedResponseError,
)
from ollachat.infrastructure.llm.prompts import DEFAULT_SYSTEM_PROMPT

__all__ = [
    "BackendUnreachableError",
    "DEFAULT_SYSTEM_PROMPT",
    "GenerationClient",
    "GenerationError",
    "MalformedResponseError",
]
