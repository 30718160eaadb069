#!/usr/bin/env python3
"""
ignr CLI Main Application

Typer-based command-line interface: global options are parsed by the app
callback, which prepares the RuntimeContext shared by every command.
"""

import sys
from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console

from ignr import __version__
from ignr.cli.commands import config, generate, templates
from ignr.cli.completion import completions
from ignr.cli.context import ColorOption, CommonOptions, RuntimeContext, make_console, setup_logging
from ignr.cli.error_handling import handle_error
from ignr.core.exceptions import IgnrError


console = Console()

app = typer.Typer(
    name="ignr",
    help="Auto-detect languages and tools and generate .gitignore files",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command("generate")(generate.generate)
app.command("gen", hidden=True)(generate.generate)
app.command("g", hidden=True)(generate.generate)
app.command("list")(templates.list_templates)
app.command("ls", hidden=True)(templates.list_templates)
app.command("sync")(templates.sync)
app.command("init")(config.init)
app.add_typer(config.app, name="config")
app.command("completions")(completions)


def version_callback(value: bool):
    """Show version information."""
    if value:
        typer.echo(f"ignr {__version__}")
        raise typer.Exit()


@app.callback()
def app_callback(
    ctx: typer.Context,
    config_path: Annotated[Optional[Path], typer.Option("--config", metavar="PATH", help="Config file, or directory containing config.yaml")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Suppress non-error output")] = False,
    verbose: Annotated[int, typer.Option("--verbose", "-v", count=True, help="Increase verbosity (-v, -vv, -vvv)")] = 0,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
    trace: Annotated[bool, typer.Option("--trace", help="Enable trace logging")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    yaml_output: Annotated[bool, typer.Option("--yaml", help="Output as YAML")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output")] = False,
    color: Annotated[ColorOption, typer.Option("--color", case_sensitive=False, help="When to use colour")] = ColorOption.AUTO,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would happen without writing anything")] = False,
    assume_yes: Annotated[bool, typer.Option("--yes", "-y", help="Assume yes for confirmations")] = False,
    version: Annotated[Optional[bool], typer.Option("--version", callback=version_callback, is_eager=True, help="Show version information and exit")] = None,
):
    """
    ignr - generate .gitignore files from your project's stack

    [bold]Quick Start:[/bold]

    • Generate for the current repo: [cyan]ignr generate[/cyan]
    • Preview without writing: [cyan]ignr generate --print[/cyan]
    • See available templates: [cyan]ignr list[/cyan]
    • Refresh templates: [cyan]ignr sync[/cyan]
    """
    if json_output and yaml_output:
        raise typer.BadParameter("--json and --yaml are mutually exclusive")

    options = CommonOptions(
        config=config_path,
        quiet=quiet,
        verbose=verbose,
        debug=debug,
        trace=trace,
        json=json_output,
        yaml=yaml_output,
        no_color=no_color,
        color=color,
        dry_run=dry_run,
        assume_yes=assume_yes,
    )
    setup_logging(options)

    try:
        ctx.obj = RuntimeContext.create(options)
    except IgnrError as e:
        handle_error(e, make_console(options, stderr=True), options.output_format)


def main():
    """Entry point for the ignr console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
