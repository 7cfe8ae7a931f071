"""
Tmux session management for Overstory.

This package drives detached tmux sessions that host agent processes:
- Session creation with pid discovery
- Session listing and liveness checks
- Keystroke injection
- Session termination
"""

from .service import (
    DEFAULT_BENIGN_EMPTY_MARKERS,
    Session,
    TmuxError,
    TmuxInvocationError,
    TmuxPidNotResolvedError,
    TmuxService,
    create_session,
    get_tmux_service,
    is_session_alive,
    kill_session,
    list_sessions,
    parse_session_list,
    reset_tmux_service,
    send_keys,
)

__all__ = [
    "DEFAULT_BENIGN_EMPTY_MARKERS",
    "Session",
    "TmuxError",
    "TmuxInvocationError",
    "TmuxPidNotResolvedError",
    "TmuxService",
    "create_session",
    "get_tmux_service",
    "is_session_alive",
    "kill_session",
    "list_sessions",
    "parse_session_list",
    "reset_tmux_service",
    "send_keys",
]
