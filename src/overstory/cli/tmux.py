"""CLI commands for tmux session management."""

import asyncio
import sys
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import click

from ..tmux import TmuxError, TmuxService, get_tmux_service
from .utils import CliError, error_handler, output_json, output_table, success_message

T = TypeVar("T")


def _service(ctx: click.Context) -> TmuxService:
    if ctx.obj and ctx.obj.get("tmux_service"):
        return ctx.obj["tmux_service"]
    return get_tmux_service()


def _json(ctx: click.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("json"))


def _drive(coro: Coroutine[Any, Any, T]) -> T:
    """Run a driver coroutine, reporting tmux failures as CLI errors."""
    try:
        return asyncio.run(coro)
    except TmuxError as e:
        raise CliError(e.message) from e


@click.group()
def tmux() -> None:
    """Manage tmux sessions that host agent processes."""
    pass


@tmux.command()
@click.argument("session_name")
@click.argument("working_directory", type=click.Path(path_type=Path))
@click.argument("command")
@click.pass_context
@error_handler
def create(
    ctx: click.Context, session_name: str, working_directory: Path, command: str
) -> None:
    """Create a detached session running COMMAND.

    SESSION_NAME: Name for the tmux session
    WORKING_DIRECTORY: Directory the session starts in
    COMMAND: Shell command line to run inside the session
    """
    service = _service(ctx)
    pid = _drive(service.create_session(session_name, working_directory, command))

    if _json(ctx):
        output_json({"session_name": session_name, "pid": pid})
    else:
        success_message(f"Created tmux session '{session_name}'")
        click.echo(f"PID: {pid}")


@tmux.command(name="list")
@click.pass_context
@error_handler
def list_cmd(ctx: click.Context) -> None:
    """List active tmux sessions."""
    sessions = _drive(_service(ctx).list_sessions())

    if _json(ctx):
        output_json([{"name": s.name, "pid": s.pid} for s in sessions])
    elif not sessions:
        click.echo("No active sessions")
    else:
        output_table(["Session", "PID"], [[s.name, str(s.pid)] for s in sessions])


@tmux.command()
@click.argument("session_name")
@click.pass_context
@error_handler
def kill(ctx: click.Context, session_name: str) -> None:
    """Kill a tmux session.

    SESSION_NAME: Name of the session to kill
    """
    _drive(_service(ctx).kill_session(session_name))

    if _json(ctx):
        output_json({"session_name": session_name, "killed": True})
    else:
        success_message(f"Killed tmux session '{session_name}'")


@tmux.command()
@click.argument("session_name")
@click.pass_context
def alive(ctx: click.Context, session_name: str) -> None:
    """Check whether a session exists. Exits 1 if it does not."""
    is_alive = asyncio.run(_service(ctx).is_session_alive(session_name))

    if _json(ctx):
        output_json({"session_name": session_name, "alive": is_alive})
    else:
        click.echo("alive" if is_alive else "gone")

    if not is_alive:
        sys.exit(1)


@tmux.command()
@click.argument("session_name")
@click.argument("text")
@click.pass_context
@error_handler
def send(ctx: click.Context, session_name: str, text: str) -> None:
    """Send TEXT followed by Enter to a session.

    SESSION_NAME: Target session
    TEXT: Literal text to type
    """
    _drive(_service(ctx).send_keys(session_name, text))

    if _json(ctx):
        output_json({"session_name": session_name, "sent": True})
    else:
        success_message(f"Sent keys to '{session_name}'")
