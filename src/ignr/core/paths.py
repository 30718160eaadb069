"""
Application Paths

Resolves the config file, data directory and cache directory following the
XDG base directory conventions.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ignr import APP_NAME
from ignr.core.config.models import AppConfig
from ignr.utils import expand_path


CONFIG_FILENAME = "config.yaml"


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value) / APP_NAME
    return fallback / APP_NAME


def default_config_dir() -> Path:
    return _xdg_dir('XDG_CONFIG_HOME', Path.home() / ".config")


def default_data_dir() -> Path:
    return _xdg_dir('XDG_DATA_HOME', Path.home() / ".local" / "share")


def default_cache_dir() -> Path:
    return _xdg_dir('XDG_CACHE_HOME', Path.home() / ".cache")


@dataclass
class AppPaths:
    """Resolved locations used by a single invocation."""

    config_file: Path
    data_dir: Path
    cache_dir: Path

    @classmethod
    def discover(cls, override: Optional[Union[str, Path]] = None) -> "AppPaths":
        """
        Resolve default paths.

        Args:
            override: Config file path, or a directory holding ``config.yaml``

        Returns:
            AppPaths with default data and cache directories
        """
        if override:
            config_file = expand_path(override)
            if config_file.is_dir():
                config_file = config_file / CONFIG_FILENAME
        else:
            config_file = default_config_dir() / CONFIG_FILENAME

        return cls(
            config_file=config_file,
            data_dir=default_data_dir(),
            cache_dir=default_cache_dir(),
        )

    def apply_overrides(self, config: AppConfig) -> "AppPaths":
        """Return a copy with ``paths.*`` config overrides applied."""
        return AppPaths(
            config_file=self.config_file,
            data_dir=expand_path(config.paths.data_dir) if config.paths.data_dir else self.data_dir,
            cache_dir=expand_path(config.paths.cache_dir) if config.paths.cache_dir else self.cache_dir,
        )

    @property
    def data_templates_dir(self) -> Path:
        return self.data_dir / "templates"

    @property
    def cache_templates_dir(self) -> Path:
        return self.cache_dir / "templates"

    def __str__(self) -> str:
        return f"config: {self.config_file}, data: {self.data_dir}, cache: {self.cache_dir}"
