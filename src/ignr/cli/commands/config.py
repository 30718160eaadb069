"""
Configuration Commands

``init`` creates the default configuration and ``config show|path|reset``
inspect and manage it.
"""

import logging
from typing import Annotated

import typer
from rich.markup import escape

from ignr.cli.context import OutputFormat, make_console
from ignr.cli.error_handling import handle_error
from ignr.cli.utils import config_table, emit, get_runtime
from ignr.core.config import ConfigManager
from ignr.core.exceptions import ConfigurationError, ErrorCode, IgnrError


logger = logging.getLogger(__name__)

app = typer.Typer(
    name="config",
    help="Inspect and manage configuration",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def init(
    ctx: typer.Context,
    force: Annotated[bool, typer.Option("--force", help="Recreate configuration even if it already exists")] = False,
):
    """Create config directories and the default config file."""
    runtime = get_runtime(ctx)
    config_file = runtime.paths.config_file
    try:
        # A file written moments ago by start-up counts as freshly initialised.
        exists = config_file.exists() and not runtime.config_created
        if exists and not (force or runtime.options.assume_yes):
            raise ConfigurationError(
                f"config already exists at {config_file} (use --force to overwrite)",
                error_code=ErrorCode.CONFIG_ALREADY_EXISTS
            )

        if runtime.dry_run:
            logger.info("dry-run: would write default config to %s", config_file)
            emit(runtime, {"path": str(config_file), "dry_run": True})
            return

        if not runtime.config_created:
            runtime.config_manager.write_default_config()
        emit(runtime, {"path": str(config_file), "created": True}, f"Created config at {escape(str(config_file))}")
    except IgnrError as e:
        handle_error(e, make_console(runtime.options, stderr=True), runtime.output_format)


@app.command("show")
def show(ctx: typer.Context):
    """Output the effective configuration."""
    runtime = get_runtime(ctx)
    data = ConfigManager.to_dict(runtime.config)
    if runtime.output_format == OutputFormat.TEXT:
        runtime.console.print(config_table(data))
    else:
        emit(runtime, data)


@app.command("path")
def path(ctx: typer.Context):
    """Print the resolved config file path."""
    runtime = get_runtime(ctx)
    config_file = str(runtime.paths.config_file)
    if runtime.output_format == OutputFormat.TEXT:
        typer.echo(config_file)
    else:
        emit(runtime, {"path": config_file})


@app.command("reset")
def reset(ctx: typer.Context):
    """Regenerate the default configuration file."""
    runtime = get_runtime(ctx)
    config_file = runtime.paths.config_file
    try:
        if runtime.dry_run:
            logger.info("dry-run: would reset config at %s", config_file)
            emit(runtime, {"path": str(config_file), "dry_run": True})
            return

        runtime.config_manager.write_default_config()
        emit(runtime, {"path": str(config_file), "reset": True}, f"Reset config at {escape(str(config_file))}")
    except IgnrError as e:
        handle_error(e, make_console(runtime.options, stderr=True), runtime.output_format)
