"""Use cases."""

from ollachat.application.use_cases.request_orchestrator import (
    AskResult,
    RequestOrchestrator,
    wrap_prompt,
)

__all__ = [
    "AskResult",
    "RequestOrchestrator",
    "wrap_prompt",
]
