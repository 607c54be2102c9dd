"""Fire-and-forget terminal command runner."""

import asyncio
import logging
from pathlib import Path

from ollachat.domain.exceptions import CommandExecutionError

logger = logging.getLogger(__name__)


class ShellCommandRunner:
    """Starts shell commands in the workspace without capturing results.

    The caller only gets an acknowledgement; the exit status is logged
    when the process finishes.
    """

    def __init__(self, cwd: str | Path) -> None:
        """Initialize the runner.

        Args:
            cwd: Working directory for commands (the workspace root).
        """
        self._cwd = Path(cwd)
        self._watchers: set[asyncio.Task[None]] = set()

    async def run(self, command: str) -> str:
        """Start a command.

        Args:
            command: Shell command line.

        Returns:
            Acknowledgement text.

        Raises:
            CommandExecutionError: If the command is empty or cannot be started.
        """
        if not command.strip():
            raise CommandExecutionError(command, "Command is empty")

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=self._cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error("Failed to start command %r: %s", command, e)
            raise CommandExecutionError(
                command, f"Failed to execute command: {e}"
            ) from e

        logger.info("Started command %r (pid=%s)", command, process.pid)
        task = asyncio.create_task(self._watch(command, process))
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)
        return f"Executing command: {command}"

    async def _watch(self, command: str, process: asyncio.subprocess.Process) -> None:
        returncode = await process.wait()
        if returncode == 0:
            logger.info("Command %r finished", command)
        else:
            logger.warning("Command %r exited with status %d", command, returncode)

    async def wait_all(self, timeout: float | None = None) -> None:
        """Wait until every started command has finished.

        Args:
            timeout: Seconds to wait. Watchers still pending afterwards are
                cancelled; their processes keep running unobserved.
        """
        if not self._watchers:
            return

        _, pending = await asyncio.wait(set(self._watchers), timeout=timeout)
        if pending:
            logger.warning("%d command(s) still running, not waiting", len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
