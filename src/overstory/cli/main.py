"""Main CLI entry point for Overstory."""

from pathlib import Path

import click

from .. import __version__
from ..config.loader import load_config
from ..tmux import TmuxService
from ..utils.logging import ConfigurationError, setup_logging
from .tmux import tmux


@click.group()
@click.version_option(version=__version__, prog_name="overstory")
@click.option("--config", "-c", help="Configuration file path")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--json", is_flag=True, help="Output in JSON format")
# Configuration override flags
@click.option("--tmux-binary", help="Override tmux_binary setting")
@click.option("--log-level", help="Override log_level setting")
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    verbose: bool,
    json: bool,
    tmux_binary: str | None,
    log_level: str | None,
) -> None:
    """Overstory - run agent processes in detached tmux sessions.

    Use command groups to organize functionality:
    - tmux: Create, list, check, message and kill sessions
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json

    try:
        settings = load_config(
            config,
            cli_overrides={"tmux_binary": tmux_binary, "log_level": log_level},
        )
    except (ConfigurationError, FileNotFoundError) as e:
        raise click.UsageError(str(e))

    # Console logging only with --verbose so command output stays parseable
    setup_logging(
        log_level=settings.log_level,
        log_file=Path(settings.log_file).expanduser() if settings.log_file else None,
        enable_structured=settings.log_format == "json",
        enable_console=verbose,
        verbose=verbose,
    )

    ctx.obj["settings"] = settings
    ctx.obj["tmux_service"] = TmuxService.from_config(settings)


main.add_command(tmux)


if __name__ == "__main__":
    main()
