"""Overstory: tmux session driver for background agent processes."""

__version__ = "0.1.0"

from .tmux import Session, TmuxError, TmuxService

__all__ = ["Session", "TmuxError", "TmuxService", "__version__"]
