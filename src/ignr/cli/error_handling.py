import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.padding import Padding

from ignr.cli.context import OutputFormat
from ignr.cli.utils import dump_structured
from ignr.core.exceptions import IgnrError

logger = logging.getLogger(__name__)


def handle_error(err: IgnrError, console: Console = None, output_format: OutputFormat = OutputFormat.TEXT):
    """
    Formats an IgnrError with its suggestions on stderr and exits with status 1.

    With --json or --yaml the error is written to stderr as a structured
    document instead of a panel.
    """
    logger.debug("%s (code %s, trace %s)", err.message, err.error_code.value, err.context.correlation_id,
                 exc_info=err.cause)

    if output_format != OutputFormat.TEXT:
        typer.echo(dump_structured(err.to_dict(), output_format), err=True)
        raise typer.Exit(code=1)

    console = console or Console(stderr=True)
    console.print()
    error_panel = Panel(
        Text(err.message),
        title=f"[bold red]Error: {err.__class__.__name__}[/bold red]",
        border_style="red",
        expand=False
    )
    console.print(error_panel)

    if err.suggestions:
        console.print("\n[bold green]Suggested solutions:[/bold green]")
        for i, suggestion in enumerate(err.suggestions, 1):
            suggestion_text = Text(f"{i}. {suggestion.action}: {suggestion.description}\n")
            if suggestion.command:
                suggestion_text.append("   Run: ", style="bold")
                suggestion_text.append(suggestion.command, style="cyan")
            console.print(Padding(suggestion_text, (0, 1)))

    raise typer.Exit(code=1)
