"""Generation backend exceptions."""


class GenerationError(Exception):
    """Base exception for generation backend errors."""


class BackendUnreachableError(GenerationError):
    """The backend could not be reached (connection, timeout, DNS, HTTP status)."""


class MalformedResponseError(GenerationError):
    """The backend replied without the expected text field."""
