"""
Tmux session driver.

This module drives an already running tmux server through its command-line
interface: it builds argument vectors, runs them, parses the textual output
into Session records and classifies failures. It holds no session state;
every call queries tmux afresh.
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..utils.logging import AgentError
from ..utils.process import ProcessError, ProcessResult, run_command
from .logging_utils import (
    log_benign_empty,
    log_session_list,
    log_session_operation,
)

if TYPE_CHECKING:
    from ..config.loader import OverstoryConfig

Runner = Callable[..., Awaitable[ProcessResult]]

LIST_FORMAT = "#{session_name}:#{pid}"

# stderr fragments from list-sessions that mean "nothing running", not failure
DEFAULT_BENIGN_EMPTY_MARKERS = (
    "no server running",
    "no sessions",
)


@dataclass(frozen=True)
class Session:
    """Snapshot of one active tmux session."""

    name: str
    pid: int


def parse_session_list(output: str) -> list[Session]:
    """Parse ``name:pid`` lines as printed by ``list-sessions``.

    Lines without a colon, with an empty name or with a non-numeric pid are
    skipped. Order follows the input.

    Args:
        output: Raw stdout of the list command

    Returns:
        List of Session records
    """
    sessions = []
    for line in output.splitlines():
        if not line.strip():
            continue

        name, sep, pid_text = line.partition(":")
        pid_text = pid_text.strip()
        if not sep or not name or not (pid_text.isascii() and pid_text.isdigit()):
            continue

        sessions.append(Session(name=name, pid=int(pid_text)))

    return sessions


class TmuxService:
    """Stateless driver for tmux sessions."""

    def __init__(
        self,
        tmux_binary: str = "tmux",
        benign_empty_markers: Iterable[str] = DEFAULT_BENIGN_EMPTY_MARKERS,
        runner: Runner = run_command,
    ):
        """Initialize tmux service.

        Args:
            tmux_binary: Executable used for every invocation
            benign_empty_markers: stderr substrings treated as an empty listing
            runner: Coroutine function that runs an argument vector
        """
        self.tmux_binary = tmux_binary
        self.benign_empty_markers = tuple(
            marker.lower() for marker in benign_empty_markers
        )
        self._runner = runner

    @classmethod
    def from_config(cls, config: "OverstoryConfig") -> "TmuxService":
        """Build a service from loaded configuration."""
        return cls(
            tmux_binary=config.tmux_binary,
            benign_empty_markers=config.benign_empty_markers,
        )

    async def create_session(
        self, name: str, working_directory: Path | str, command: str
    ) -> int:
        """Create a detached session and return the pid of its process.

        The session name must not contain a colon, since listing output is
        split on the first one.

        Creation is two invocations: ``new-session`` followed by
        ``list-sessions`` to discover the pid. If the second step fails the
        session may still exist in tmux.

        Args:
            name: Session name
            working_directory: Directory the session starts in
            command: Shell command line run inside the session

        Returns:
            Pid of the session's controlling process

        Raises:
            TmuxInvocationError: If tmux rejects the creation or the listing
            TmuxPidNotResolvedError: If the new session is missing from the listing
        """
        log_session_operation("create", name, "starting")

        result = await self._run(
            ["new-session", "-d", "-s", name, "-c", str(working_directory), command],
            operation="create",
            session_name=name,
            cwd=working_directory,
        )
        if not result.succeeded:
            raise self._invocation_error(
                f"Failed to create tmux session '{name}'", "create", name, result.stderr
            )

        try:
            sessions = await self.list_sessions()
        except TmuxInvocationError as e:
            log_session_operation("create", name, "error", {"stderr": e.stderr})
            raise TmuxInvocationError(
                f"Session '{name}' created but listing sessions failed: {e.stderr}",
                session_name=name,
                operation="create",
                stderr=e.stderr,
            ) from e

        for session in sessions:
            if session.name == name:
                log_session_operation("create", name, "success", {"pid": session.pid})
                return session.pid

        log_session_operation("create", name, "error", {"reason": "pid not resolved"})
        raise TmuxPidNotResolvedError(
            f"Session '{name}' created but PID could not be determined",
            session_name=name,
            operation="create",
        )

    async def list_sessions(self) -> list[Session]:
        """List all sessions known to tmux.

        A failure whose stderr matches a benign-empty marker (no server, no
        sessions) yields an empty list.

        Returns:
            List of Session records in tmux's reporting order

        Raises:
            TmuxInvocationError: On any other failure
        """
        result = await self._run(["list-sessions", "-F", LIST_FORMAT], operation="list")

        if not result.succeeded:
            if self.is_benign_empty(result.stderr):
                log_benign_empty(result.stderr)
                return []
            raise self._invocation_error(
                "Failed to list tmux sessions", "list", None, result.stderr
            )

        sessions = parse_session_list(result.stdout)
        log_session_list([s.name for s in sessions])
        return sessions

    async def kill_session(self, name: str) -> None:
        """Kill a session.

        Args:
            name: Session name

        Raises:
            TmuxInvocationError: If tmux fails to kill the session
        """
        result = await self._run(
            ["kill-session", "-t", name], operation="kill", session_name=name
        )
        if not result.succeeded:
            raise self._invocation_error(
                f"Failed to kill tmux session '{name}'", "kill", name, result.stderr
            )

        log_session_operation("kill", name, "success")

    async def is_session_alive(self, name: str) -> bool:
        """Check whether a session exists. Never raises.

        Args:
            name: Session name

        Returns:
            True if ``has-session`` exits 0
        """
        try:
            result = await self._run(
                ["has-session", "-t", name], operation="alive", session_name=name
            )
        except TmuxInvocationError:
            return False
        return result.succeeded

    async def send_keys(self, name: str, text: str) -> None:
        """Type text into a session followed by Enter.

        Args:
            name: Session name
            text: Literal text, without a trailing newline

        Raises:
            TmuxInvocationError: If tmux fails to deliver the keys
        """
        result = await self._run(
            ["send-keys", "-t", name, text, "Enter"],
            operation="send",
            session_name=name,
        )
        if not result.succeeded:
            raise self._invocation_error(
                f"Failed to send keys to tmux session '{name}'",
                "send",
                name,
                result.stderr,
            )

        log_session_operation("send", name, "success")

    def is_benign_empty(self, stderr: str) -> bool:
        """Return True if list stderr means there is simply nothing running."""
        lowered = stderr.lower()
        return any(marker in lowered for marker in self.benign_empty_markers)

    async def _run(
        self,
        args: list[str],
        operation: str,
        session_name: str | None = None,
        cwd: Path | str | None = None,
    ) -> ProcessResult:
        """Run tmux with the given arguments.

        A tool that cannot be launched is reported as a TmuxInvocationError.
        """
        command = [self.tmux_binary, *args]
        try:
            if cwd is not None:
                return await self._runner(command, cwd=cwd)
            return await self._runner(command)
        except ProcessError as e:
            raise self._invocation_error(
                f"Failed to run tmux {operation}", operation, session_name, str(e)
            ) from e

    def _invocation_error(
        self, message: str, operation: str, session_name: str | None, stderr: str
    ) -> "TmuxInvocationError":
        stderr = stderr.strip()
        log_session_operation(operation, session_name, "error", {"stderr": stderr})
        if stderr:
            message = f"{message}: {stderr}"
        return TmuxInvocationError(
            message, session_name=session_name, operation=operation, stderr=stderr
        )


class TmuxError(AgentError):
    """Exception raised for tmux operation errors."""

    def __init__(
        self,
        message: str,
        session_name: str | None = None,
        operation: str | None = None,
        stderr: str = "",
        context: dict[str, Any] | None = None,
    ):
        """Initialize TmuxError.

        Args:
            message: Error message
            session_name: Session the failed operation concerned, if any
            operation: Driver operation that failed
            stderr: Raw diagnostic text from tmux
            context: Optional extra context
        """
        super().__init__(message, agent_name=session_name, context=context)
        self.operation = operation
        self.stderr = stderr

    @property
    def session_name(self) -> str | None:
        return self.agent_name


class TmuxInvocationError(TmuxError):
    """tmux exited non-zero for a reason that is not an empty listing."""

    pass


class TmuxPidNotResolvedError(TmuxError):
    """A session was created but did not appear in the following listing."""

    pass


# Global tmux service instance
_tmux_service: TmuxService | None = None


def get_tmux_service() -> TmuxService:
    """Get the global tmux service instance.

    Returns:
        TmuxService instance
    """
    global _tmux_service
    if _tmux_service is None:
        _tmux_service = TmuxService()
    return _tmux_service


def reset_tmux_service(service: TmuxService | None = None) -> None:
    """Replace the global tmux service, or clear it when None."""
    global _tmux_service
    _tmux_service = service


async def create_session(name: str, working_directory: Path | str, command: str) -> int:
    """Create a session with the global service and return its pid."""
    return await get_tmux_service().create_session(name, working_directory, command)


async def list_sessions() -> list[Session]:
    """List sessions with the global service."""
    return await get_tmux_service().list_sessions()


async def kill_session(name: str) -> None:
    """Kill a session with the global service."""
    await get_tmux_service().kill_session(name)


async def is_session_alive(name: str) -> bool:
    """Check a session with the global service."""
    return await get_tmux_service().is_session_alive(name)


async def send_keys(name: str, text: str) -> None:
    """Send keys with the global service."""
    await get_tmux_service().send_keys(name, text)
