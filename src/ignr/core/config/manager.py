"""
Configuration Manager

Handles configuration loading, validation, and management with support for
environment variables → config file → defaults.
"""

import os
import json
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from pydantic import ValidationError

from ignr.core.config.models import AppConfig
from ignr.core.exceptions import ConfigurationError, ErrorCode


logger = logging.getLogger(__name__)

ENV_PREFIX = "IGNR_"

DEFAULT_CONFIG_TEMPLATE = """\
# Configuration for ignr
# Auto-detect languages/tools and generate .gitignore files

templates:
  # Local directory containing custom .gitignore templates
  # template_dir: ~/.config/ignr/templates

  # Remote URL to fetch templates from (gitignore.io compatible API)
  template_url: https://www.toptal.com/developers/gitignore/api

  # Whether to prefer local/custom templates over embedded ones
  prefer_local: true

  # Templates to always include in generated .gitignore
  always_include: []
  # always_include: [macos, vscode]

  # Fetch templates that are not available locally from template_url
  fetch_missing: false

  # Request timeout (seconds) and retry attempts for remote templates
  timeout: 30
  max_retries: 2

detection:
  # Maximum directory depth to scan for technology detection
  max_depth: 10

  # Whether to auto-detect OS and add OS-specific patterns
  detect_os: true

  # Whether to detect IDE/editor directories and add patterns
  detect_ide: true

paths:
  # Override the data directory (defaults to $XDG_DATA_HOME/ignr)
  # Synced and embedded templates are stored here
  # data_dir: ~/.local/share/ignr

  # Override the cache directory (defaults to $XDG_CACHE_HOME/ignr)
  # cache_dir: ~/.cache/ignr
"""


class ConfigManager:
    """
    Manages application configuration with hierarchical loading and validation.

    Configuration sources in order of precedence:
    1. Environment variables (highest priority)
    2. Configuration file
    3. Default values (lowest priority)

    Environment variables use the ``IGNR_`` prefix and ``__`` between the
    section and the key, e.g. ``IGNR_DETECTION__MAX_DEPTH=3``.
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None

    def load_config(self, env_prefix: str = ENV_PREFIX) -> AppConfig:
        """
        Load and validate configuration from all sources.

        Args:
            env_prefix: Prefix for environment variables

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_config_file()
        if file_config:
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Config file {self.config_file} must contain a mapping",
                    error_code=ErrorCode.CONFIG_INVALID_FORMAT
                )
            # Sections holding only comments load as None.
            config_data.update({k: v for k, v in file_config.items() if v is not None})

        env_config = self._load_env_config(env_prefix)
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        try:
            self._config = AppConfig(**config_data)
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}",
                error_code=ErrorCode.CONFIG_INVALID_VALUE,
                cause=e
            )
        return self._config

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        config_file = self.config_file
        if not config_file or not config_file.is_file():
            return None

        logger.debug("Loading configuration from %s", config_file)
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() == '.json':
                    return json.load(f)
                return yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_file}: {e}",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                cause=e
            )

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        env_mappings = {
            # Templates
            f"{prefix}TEMPLATES__TEMPLATE_DIR": ("templates", "template_dir", str),
            f"{prefix}TEMPLATES__TEMPLATE_URL": ("templates", "template_url", str),
            f"{prefix}TEMPLATES__PREFER_LOCAL": ("templates", "prefer_local", self._parse_bool),
            f"{prefix}TEMPLATES__ALWAYS_INCLUDE": ("templates", "always_include", self._parse_list),
            f"{prefix}TEMPLATES__FETCH_MISSING": ("templates", "fetch_missing", self._parse_bool),
            f"{prefix}TEMPLATES__TIMEOUT": ("templates", "timeout", int),
            f"{prefix}TEMPLATES__MAX_RETRIES": ("templates", "max_retries", int),

            # Detection
            f"{prefix}DETECTION__MAX_DEPTH": ("detection", "max_depth", int),
            f"{prefix}DETECTION__DETECT_OS": ("detection", "detect_os", self._parse_bool),
            f"{prefix}DETECTION__DETECT_IDE": ("detection", "detect_ide", self._parse_bool),

            # Paths
            f"{prefix}PATHS__DATA_DIR": ("paths", "data_dir", str),
            f"{prefix}PATHS__CACHE_DIR": ("paths", "cache_dir", str),
        }

        for env_var, (section, key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            try:
                parsed_value = parser(value)
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid value for {env_var}: {value} ({e})",
                    error_code=ErrorCode.CONFIG_INVALID_VALUE,
                    config_key=f"{section}.{key}",
                    config_value=value
                )
            env_config.setdefault(section, {})[key] = parsed_value
            logger.debug("Environment override %s -> %s.%s", env_var, section, key)

        return env_config

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _parse_bool(value: Union[str, bool]) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {'true', '1', 'yes', 'on', 'enabled'}
        return bool(value)

    @staticmethod
    def _parse_list(value: Union[str, List[str]]) -> List[str]:
        """Parse list value from string."""
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            return [item.strip() for item in value.split(',') if item.strip()]
        return []

    def write_default_config(self, output_file: Optional[Path] = None) -> Path:
        """
        Write the commented default configuration file.

        Args:
            output_file: Target path (defaults to the managed config file)

        Returns:
            Path that was written
        """
        target = Path(output_file) if output_file else self.config_file
        if target is None:
            raise ConfigurationError(
                "No configuration file path to write to",
                error_code=ErrorCode.CONFIG_MISSING_REQUIRED
            )

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(
                f"Failed to write config file {target}: {e}",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                cause=e
            )
        logger.info("Wrote default configuration to %s", target)
        return target

    @staticmethod
    def to_dict(config: AppConfig) -> Dict[str, Any]:
        """Serialise configuration for JSON/YAML output."""
        return config.model_dump(mode='json')

    @property
    def config(self) -> Optional[AppConfig]:
        """Get the loaded configuration."""
        return self._config
