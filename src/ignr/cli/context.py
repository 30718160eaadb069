"""
Runtime Context

Global CLI options, logging setup and the per-invocation state shared by
all commands (resolved paths, loaded configuration, consoles).
"""

import os
import sys
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from rich.console import Console

from ignr.core.config import AppConfig, ConfigManager
from ignr.core.paths import AppPaths
from ignr.core.templates import TemplateManager, seed_templates
from ignr.core.exceptions import ConfigurationError, ErrorCode
from ignr.utils import TRACE


logger = logging.getLogger(__name__)


class ColorOption(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


@dataclass
class CommonOptions:
    """Options accepted before any sub-command."""

    config: Optional[Path] = None
    quiet: bool = False
    verbose: int = 0
    debug: bool = False
    trace: bool = False
    json: bool = False
    yaml: bool = False
    no_color: bool = False
    color: ColorOption = ColorOption.AUTO
    dry_run: bool = False
    assume_yes: bool = False

    @property
    def output_format(self) -> OutputFormat:
        if self.json:
            return OutputFormat.JSON
        if self.yaml:
            return OutputFormat.YAML
        return OutputFormat.TEXT

    def effective_log_level(self) -> int:
        if self.trace:
            return TRACE
        if self.debug:
            return logging.DEBUG
        return {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}.get(self.verbose, TRACE)

    def color_mode(self) -> Optional[bool]:
        """True forces colour, False disables it, None leaves it to the terminal."""
        if self.no_color or self.color == ColorOption.NEVER or os.environ.get("NO_COLOR"):
            return False
        if self.color == ColorOption.ALWAYS or os.environ.get("FORCE_COLOR"):
            return True
        return None


def make_console(options: CommonOptions, stderr: bool = False) -> Console:
    mode = options.color_mode()
    return Console(
        stderr=stderr,
        no_color=mode is False,
        force_terminal=True if mode else None,
        highlight=False,
    )


_HANDLER_MARKER = "_ignr_handler"


def setup_logging(options: CommonOptions) -> None:
    """Attach a stderr handler to the package logger."""
    package_logger = logging.getLogger("ignr")
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            package_logger.removeHandler(handler)

    if options.quiet:
        package_logger.setLevel(logging.CRITICAL + 1)
        return

    level = options.effective_log_level()
    if level <= logging.DEBUG:
        fmt = '%(levelname)s - %(name)s - %(message)s'
    else:
        fmt = '%(levelname)s: %(message)s'

    handler = logging.StreamHandler(sys.stderr)
    setattr(handler, _HANDLER_MARKER, True)
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


class RuntimeContext:
    """State for one CLI invocation."""

    def __init__(
        self,
        options: CommonOptions,
        paths: AppPaths,
        config: AppConfig,
        config_manager: ConfigManager,
        config_created: bool = False
    ):
        self.options = options
        self.paths = paths
        self.config = config
        self.config_manager = config_manager
        self.config_created = config_created
        self.console = make_console(options)

    @classmethod
    def create(cls, options: CommonOptions) -> "RuntimeContext":
        """
        Resolve paths, load configuration and prepare data directories.

        A missing config file is written with defaults, and an empty data
        template directory is seeded from the embedded templates; neither
        happens on ``--dry-run``.

        Raises:
            ConfigurationError: If the configuration cannot be loaded
        """
        paths = AppPaths.discover(options.config)
        manager = ConfigManager(paths.config_file)

        created = False
        if not paths.config_file.exists():
            if options.dry_run:
                logger.info("dry-run: would create default config at %s", paths.config_file)
            else:
                manager.write_default_config()
                created = True

        config = manager.load_config()
        paths = paths.apply_overrides(config)
        logger.debug("Resolved paths: %s", paths)

        ctx = cls(options, paths, config, manager, config_created=created)
        ctx.ensure_directories()
        seed_templates(paths.data_templates_dir, dry_run=options.dry_run)
        return ctx

    def ensure_directories(self) -> None:
        if self.options.dry_run:
            logger.info(
                "dry-run: would ensure data dir %s and cache dir %s",
                self.paths.data_dir, self.paths.cache_dir
            )
            return

        for directory in (self.paths.data_dir, self.paths.cache_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot create directory {directory}: {e}",
                    error_code=ErrorCode.CONFIG_INVALID_VALUE,
                    cause=e
                )

    def template_manager(self) -> TemplateManager:
        return TemplateManager(self.config.templates, self.paths, dry_run=self.options.dry_run)

    @property
    def output_format(self) -> OutputFormat:
        return self.options.output_format

    @property
    def quiet(self) -> bool:
        return self.options.quiet

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run
