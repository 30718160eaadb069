"""
CLI Utilities

Shared helpers for command output in text, JSON and YAML form.
"""

import json
from typing import Any, Dict, Iterable

import typer
import yaml
from rich.markup import escape
from rich.table import Table

from ignr.cli.context import OutputFormat, RuntimeContext


def get_runtime(ctx: typer.Context) -> RuntimeContext:
    """Return the RuntimeContext stored by the app callback."""
    runtime = ctx.find_object(RuntimeContext)
    if runtime is None:
        raise typer.Exit(1)
    return runtime


def dump_structured(data: Any, fmt: OutputFormat) -> str:
    """Serialise data for --json / --yaml output."""
    if fmt == OutputFormat.YAML:
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip("\n")
    return json.dumps(data, indent=2)


def emit(runtime: RuntimeContext, data: Any, text: str = "") -> None:
    """
    Print a command result.

    Structured output goes to stdout unstyled. Text output goes through the
    rich console and is suppressed by --quiet.
    """
    if runtime.output_format != OutputFormat.TEXT:
        typer.echo(dump_structured(data, runtime.output_format))
        return
    if text and not runtime.quiet:
        runtime.console.print(text)


def emit_lines(runtime: RuntimeContext, data: Any, lines: Iterable[str]) -> None:
    """Print raw lines (no markup) or the structured form of ``data``."""
    if runtime.output_format != OutputFormat.TEXT:
        typer.echo(dump_structured(data, runtime.output_format))
        return
    for line in lines:
        typer.echo(line)


def config_table(config: Dict[str, Any]) -> Table:
    """Render a configuration dictionary as a rich table."""
    table = Table(title="Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for section, values in config.items():
        if isinstance(values, dict):
            for key, value in values.items():
                table.add_row(f"{section}.{key}", escape(_format_value(value)))
        else:
            table.add_row(section, escape(_format_value(values)))
    return table


def _format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) if value else "[]"
    return str(value)
