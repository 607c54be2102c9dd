"""Generation backend client."""

import logging
from typing import Any

import httpx

from ollachat.config import ModelConfig
from ollachat.infrastructure.llm.exceptions import (
    BackendUnreachableError,
    MalformedResponseError,
)
from ollachat.infrastructure.llm.prompts import DEFAULT_SYSTEM_PROMPT, create_jinja_env

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"


class GenerationClient:
    """Client for an Ollama-compatible /api/generate endpoint.

    Each call is one non-streaming POST. There are no retries: a failed
    attempt is raised to the caller immediately.
    """

    def __init__(
        self,
        system_prompt: str | None = None,
        *,
        debug_llm_messages: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            system_prompt: Preamble placed before the user turn.
                The built-in preamble is used if None.
            debug_llm_messages: If True, log request and response at INFO level.
        """
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._debug_llm_messages = debug_llm_messages
        self._jinja_env = create_jinja_env()
        self._template = self._jinja_env.get_template("generate_prompt.j2")

    def build_prompt(self, prompt: str) -> str:
        """Wrap a prompt with the system preamble and turn markers.

        Args:
            prompt: User prompt (possibly wrapped with context).

        Returns:
            Full prompt ending with the assistant cue.
        """
        return self._template.render(system_prompt=self._system_prompt, prompt=prompt)

    async def generate(self, prompt: str, model_config: ModelConfig) -> str:
        """Generate a completion.

        Args:
            prompt: User prompt (possibly wrapped with context).
            model_config: Backend endpoint, model name and timeout.

        Returns:
            The backend's completion text.

        Raises:
            BackendUnreachableError: Transport failure, invalid endpoint URL
                or error HTTP status.
            MalformedResponseError: The reply has no text field.
        """
        url = model_config.endpoint_base_url.rstrip("/") + GENERATE_PATH
        payload = {
            "model": model_config.model_name,
            "prompt": self.build_prompt(prompt),
            "stream": False,
        }

        logger.debug("Generation request: url=%s, model=%s", url, payload["model"])
        if self._should_log():
            self._log("=== Generation Request ===\n%s", payload["prompt"])

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    json=payload,
                    timeout=model_config.request_timeout_seconds,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Generation backend returned error status: %s", e)
            raise BackendUnreachableError(
                f"Failed to communicate with backend: {e}"
            ) from e
        except httpx.InvalidURL as e:
            logger.error("Invalid generation endpoint %r: %s", url, e)
            raise BackendUnreachableError(
                f"Failed to communicate with backend: {e}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Generation backend unreachable: %s", e)
            raise BackendUnreachableError(
                f"Failed to communicate with backend: {str(e) or type(e).__name__}"
            ) from e

        text = self._extract_text(response)
        if self._should_log():
            self._log("=== Generation Response ===\n%s", text)
        return text

    def _extract_text(self, response: httpx.Response) -> str:
        """Read the completion text from a backend reply."""
        try:
            data: Any = response.json()
        except ValueError as e:
            logger.error("Generation backend returned invalid JSON: %s", e)
            raise MalformedResponseError("Invalid response from backend") from e

        if not isinstance(data, dict):
            logger.error("Generation backend returned non-object JSON")
            raise MalformedResponseError("Invalid response from backend")

        text = data.get("response")
        if not isinstance(text, str):
            logger.error("Generation backend reply has no 'response' field")
            raise MalformedResponseError("Invalid response from backend")
        return text

    def _should_log(self) -> bool:
        """Check if prompt logging should occur."""
        return self._debug_llm_messages or logger.isEnabledFor(logging.DEBUG)

    def _log(self, message: str, *args: Any) -> None:
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func(message, *args)
