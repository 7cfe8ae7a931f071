"""
Logging and error handling framework for Overstory.

This module provides:
- Structured (JSON) and human-readable console logging
- Custom exception classes
- Context-aware logging utilities
"""

import json
import logging
import sys
import traceback
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import click


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogContext(str, Enum):
    """Log context categories for structured logging."""

    TMUX = "tmux"
    PROCESS = "process"
    CONFIG = "config"
    CLI = "cli"


class OverstoryException(Exception):
    """Base exception class for all Overstory errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.utcnow()


class ConfigurationError(OverstoryException):
    """Errors related to configuration and setup."""

    pass


class AgentError(OverstoryException):
    """Errors concerning a specific agent's session."""

    def __init__(
        self,
        message: str,
        agent_name: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context)
        self.agent_name = agent_name


# Attributes present on every LogRecord, never copied into structured output
_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "message",
    "asctime",
    "context",
    "agent_name",
}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_FIELDS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "context"):
            log_data["context"] = record.context

        if getattr(record, "agent_name", None):
            log_data["agent_name"] = record.agent_name

        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console reporter.

    Renders each record as a single line::

        [HH:MM:SS] LVL agent | event key=value key=value

    The level label is colored (gray, blue, yellow, red); time, agent name and
    key/value data are dimmed.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "bright_black",
        logging.INFO: "blue",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "red",
    }

    LEVEL_LABELS = {
        logging.DEBUG: "DBG",
        logging.INFO: "INF",
        logging.WARNING: "WRN",
        logging.ERROR: "ERR",
        logging.CRITICAL: "ERR",
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def _paint(self, text: str, **styles: Any) -> str:
        if not self.use_color:
            return text
        return click.style(text, **styles)

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname[:3])
        color = self.LEVEL_COLORS.get(record.levelno, "white")
        time = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        line = (
            f"{self._paint(f'[{time}]', dim=True)} "
            f"{self._paint(label, fg=color, bold=True)} "
        )

        agent_name = getattr(record, "agent_name", None)
        if agent_name:
            line += f"{self._paint(agent_name, dim=True)} | "

        line += record.getMessage()

        data = format_data(_extra_fields(record))
        if data:
            line += f" {self._paint(data, dim=True)}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def format_data(data: dict[str, Any]) -> str:
    """Format a mapping as space-separated key=value pairs.

    Strings containing spaces are quoted, ``None`` renders as ``null`` and
    containers are JSON-encoded.
    """
    parts = []
    for key, value in data.items():
        if value is None:
            parts.append(f"{key}=null")
        elif isinstance(value, str):
            parts.append(f'{key}="{value}"' if " " in value else f"{key}={value}")
        elif isinstance(value, dict | list | tuple):
            parts.append(f"{key}={json.dumps(value, default=str)}")
        else:
            parts.append(f"{key}={value}")
    return " ".join(parts)


class _MaxLevelFilter(logging.Filter):
    """Only pass records strictly below a level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


class ContextualLogger:
    """Logger with context management for structured logging."""

    def __init__(self, name: str, context: LogContext):
        self.logger = logging.getLogger(name)
        self.context = context.value
        self.agent_name: str | None = None

    def set_agent_name(self, agent_name: str | None) -> None:
        """Set the agent name for all subsequent log messages."""
        self.agent_name = agent_name

    def _log(
        self,
        level: int,
        message: str,
        extra_context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        """Internal logging method with context injection."""
        extra: dict[str, Any] = {"context": self.context}

        if self.agent_name:
            extra["agent_name"] = self.agent_name

        if extra_context:
            extra.update(extra_context)

        self.logger.log(level, message, exc_info=exception, extra=extra)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, exception: Exception | None = None, **kwargs) -> None:
        """Log error message with context and optional exception."""
        self._log(logging.ERROR, message, kwargs, exception)

    def critical(
        self, message: str, exception: Exception | None = None, **kwargs
    ) -> None:
        """Log critical message with context and optional exception."""
        self._log(logging.CRITICAL, message, kwargs, exception)


def get_logger(name: str, context: LogContext) -> ContextualLogger:
    """Get a contextual logger instance."""
    return ContextualLogger(name, context)


def setup_logging(
    log_level: str | LogLevel = LogLevel.INFO,
    log_file: Path | None = None,
    enable_structured: bool = True,
    enable_console: bool = True,
    verbose: bool = False,
) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Minimum log level to capture
        log_file: Optional file path for log output
        enable_structured: Use JSON structured logging format on the console
        enable_console: Enable console output
        verbose: Show debug records on the console
    """
    if isinstance(log_level, LogLevel):
        log_level = log_level.value
    level = getattr(logging, log_level.upper())

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = []

    if enable_console:
        console_level = logging.DEBUG if verbose else level
        formatter: logging.Formatter = (
            StructuredFormatter() if enable_structured else ConsoleFormatter()
        )

        # Errors go to stderr; everything else goes to stdout
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(console_level)
        stdout_handler.addFilter(_MaxLevelFilter(logging.ERROR))
        stdout_handler.setFormatter(formatter)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(formatter)

        handlers.extend([stdout_handler, stderr_handler])

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)

    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(logging.DEBUG if verbose else level)
    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
