"""
Template Commands

``list`` shows the templates that can be used and ``sync`` downloads the
remote template collection into the data directory.
"""

import logging
from typing import Optional, Annotated

import typer
from rich.markup import escape

from ignr.cli.context import OutputFormat, make_console
from ignr.cli.error_handling import handle_error
from ignr.cli.utils import emit, emit_lines, get_runtime
from ignr.core.exceptions import ConfigurationError, ErrorCode, IgnrError
from ignr.core.templates import TemplateClient


logger = logging.getLogger(__name__)


def list_templates(ctx: typer.Context):
    """List available templates."""
    runtime = get_runtime(ctx)
    templates = runtime.template_manager().list_available()
    emit_lines(runtime, templates, templates)


def sync(
    ctx: typer.Context,
    url: Annotated[Optional[str], typer.Option("--url", metavar="URL", help="Override the remote URL to sync from")] = None,
):
    """
    Sync templates from the remote source.

    Templates are saved in the data directory and take precedence over the
    embedded ones.
    """
    runtime = get_runtime(ctx)
    try:
        base_url = url or runtime.config.templates.template_url
        if not base_url:
            raise ConfigurationError(
                "No template URL configured. Set templates.template_url in config or use --url",
                error_code=ErrorCode.CONFIG_MISSING_REQUIRED,
                config_key="templates.template_url"
            )

        templates_dir = runtime.paths.data_templates_dir
        if runtime.dry_run:
            logger.info("dry-run: would sync templates from %s to %s", base_url, templates_dir)
            emit(runtime, {"url": base_url, "target": str(templates_dir), "dry_run": True})
            return

        client = TemplateClient(
            base_url,
            timeout=runtime.config.templates.timeout,
            max_retries=runtime.config.templates.max_retries,
        )
        names = client.list_remote()
        if not runtime.quiet and runtime.output_format == OutputFormat.TEXT:
            runtime.console.print(f"Found {len(names)} templates")

        result = client.sync(templates_dir, names)
        if result.failures:
            logger.debug("Failed templates: %s", ", ".join(result.failures))

        emit(
            runtime,
            {"url": base_url, "target": str(templates_dir), **result.to_dict()},
            f"Synced {result.synced} templates ({result.failed} failed) into {escape(str(templates_dir))}"
        )
    except IgnrError as e:
        handle_error(e, make_console(runtime.options, stderr=True), runtime.output_format)
