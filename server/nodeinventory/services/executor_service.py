"""Run local commands for hardware probes."""
from __future__ import annotations

import logging
import subprocess
from time import perf_counter
from typing import Optional, Protocol, Sequence

from ..core.config import settings

logger = logging.getLogger(__name__)


class CommandExecutionError(RuntimeError):
    """Raised when a probe command cannot be run or exits unsuccessfully."""

    def __init__(
        self,
        command: Sequence[str],
        message: str,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr


class CommandExecutor(Protocol):
    """Runs a command and returns its standard output."""

    def run_command(self, args: Sequence[str]) -> str:
        """Run ``args`` and return stdout."""


class LocalCommandExecutor:
    """Executes commands on this machine via subprocess."""

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else settings.command_timeout

    def run_command(self, args: Sequence[str]) -> str:
        command = list(args)
        display = " ".join(command)
        logger.debug("Running command: %s", display)
        started = perf_counter()
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error("Command timed out after %.1fs: %s", self.timeout, display)
            raise CommandExecutionError(
                command, f"Command timed out after {self.timeout:.1f}s: {display}"
            ) from None
        except OSError as exc:
            logger.error("Failed to start command %s: %s", display, exc)
            raise CommandExecutionError(command, f"Failed to start {command[0]}: {exc}") from exc

        elapsed = perf_counter() - started
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.error(
                "Command failed with exit code %d after %.2fs: %s: %s",
                result.returncode,
                elapsed,
                display,
                stderr,
            )
            raise CommandExecutionError(
                command,
                f"{display} exited with code {result.returncode}: {stderr}",
                exit_code=result.returncode,
                stderr=stderr,
            )

        logger.debug("Command finished in %.2fs: %s", elapsed, display)
        return result.stdout


local_executor = LocalCommandExecutor()
