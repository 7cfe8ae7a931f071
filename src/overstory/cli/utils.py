"""CLI utilities for output formatting and common functionality."""

import json
import sys
from collections.abc import Callable
from functools import wraps
from typing import Any

import click


class CliError(Exception):
    """Exception for CLI errors."""

    def __init__(self, message: str, exit_code: int = 1):
        """Initialize CLI error.

        Args:
            message: Error message
            exit_code: Exit code for the CLI
        """
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator for handling CLI errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CliError as e:
            click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
            sys.exit(e.exit_code)

    return wrapper


def success_message(message: str) -> None:
    """Display a success message."""
    click.echo(click.style(f"✓ {message}", fg="green"))


def output_json(data: Any) -> None:
    """Output data as JSON."""
    click.echo(json.dumps(data, indent=2))


def output_table(headers: list[str], rows: list[list[str]]) -> None:
    """Output data as a formatted table."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    header_row = " | ".join(
        h.ljust(w) for h, w in zip(headers, col_widths, strict=False)
    )
    click.echo(header_row)
    click.echo("-" * len(header_row))

    for row in rows:
        formatted_row = " | ".join(
            str(cell).ljust(w) for cell, w in zip(row, col_widths, strict=False)
        )
        click.echo(formatted_row)
