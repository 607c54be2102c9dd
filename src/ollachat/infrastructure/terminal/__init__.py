"""Terminal integration."""

from ollachat.infrastructure.terminal.runner import ShellCommandRunner

__all__ = ["ShellCommandRunner"]
