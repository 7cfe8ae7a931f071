"""Subprocess invocation for external command-line tools."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from .logging import LogContext, get_logger

logger = get_logger(__name__, LogContext.PROCESS)


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of a finished subprocess."""

    command: list[str]
    stdout: str
    stderr: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        """True if the process exited with status 0."""
        return self.exit_code == 0


async def run_command(
    command: list[str], cwd: Path | str | None = None
) -> ProcessResult:
    """Run a command to completion and capture its output.

    Each argument is passed to the OS as a discrete token; no shell is
    involved. There is no timeout: a hung child hangs the caller.

    Args:
        command: Argument vector, executable first
        cwd: Optional working directory for the child

    Returns:
        ProcessResult with decoded stdout, stderr and exit code

    Raises:
        ProcessError: If the executable cannot be launched
    """
    logger.debug("Running command", command=command, cwd=str(cwd) if cwd else None)

    try:
        process = await asyncio.create_subprocess_exec(  # nosec B603
            *command,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.error("Failed to launch command", command=command, error=str(e))
        raise ProcessError(f"Failed to launch {command[0]}: {e}", command=command) from e

    stdout, stderr = await process.communicate()
    exit_code = process.returncode if process.returncode is not None else -1

    logger.debug("Command finished", command=command, exit_code=exit_code)

    return ProcessResult(
        command=list(command),
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=exit_code,
    )


class ProcessError(Exception):
    """Exception raised when a process cannot be started."""

    def __init__(self, message: str, command: list[str] | None = None):
        """Initialize ProcessError.

        Args:
            message: Error message
            command: Argument vector that failed to launch
        """
        super().__init__(message)
        self.command = command
