"""Logging utilities for tmux operations."""

from typing import Any

from ..utils.logging import LogContext, get_logger

tmux_logger = get_logger("overstory.tmux", LogContext.TMUX)


def log_session_operation(
    operation: str,
    session_name: str | None,
    status: str,
    context: dict[str, Any] | None = None,
) -> None:
    """Log session operation."""
    logger = get_logger("overstory.tmux", LogContext.TMUX)
    logger.set_agent_name(session_name)

    message = f"Session {operation} {status}"
    if status == "error":
        logger.error(message, operation=operation, **(context or {}))
    elif status == "success":
        logger.info(message, operation=operation, **(context or {}))
    else:
        logger.debug(message, operation=operation, **(context or {}))


def log_session_list(names: list[str]) -> None:
    """Log session listing."""
    tmux_logger.debug("Sessions listed", count=len(names), sessions=names)


def log_benign_empty(stderr: str) -> None:
    """Log a list failure that means there is nothing to report."""
    tmux_logger.debug("No tmux sessions available", stderr=stderr.strip())
