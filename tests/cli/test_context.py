"""
Tests for global options, logging setup and the runtime context.
"""

import logging

import pytest

from ignr.cli.context import (
    ColorOption,
    CommonOptions,
    OutputFormat,
    RuntimeContext,
    setup_logging,
)
from ignr.core.exceptions import ConfigurationError
from ignr.utils import TRACE


class TestCommonOptions:
    """Test option derived values."""

    @pytest.mark.parametrize("kwargs,expected", [
        ({}, logging.WARNING),
        ({"verbose": 1}, logging.INFO),
        ({"verbose": 2}, logging.DEBUG),
        ({"verbose": 3}, TRACE),
        ({"debug": True}, logging.DEBUG),
        ({"trace": True, "debug": True}, TRACE),
    ])
    def test_log_level(self, kwargs, expected):
        assert CommonOptions(**kwargs).effective_log_level() == expected

    def test_output_format(self):
        assert CommonOptions().output_format == OutputFormat.TEXT
        assert CommonOptions(json=True).output_format == OutputFormat.JSON
        assert CommonOptions(yaml=True).output_format == OutputFormat.YAML

    def test_color_mode(self, monkeypatch):
        assert CommonOptions().color_mode() is None
        assert CommonOptions(no_color=True).color_mode() is False
        assert CommonOptions(color=ColorOption.NEVER).color_mode() is False
        assert CommonOptions(color=ColorOption.ALWAYS).color_mode() is True

        monkeypatch.setenv("NO_COLOR", "1")
        assert CommonOptions(color=ColorOption.ALWAYS).color_mode() is False

    def test_force_color_env(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert CommonOptions().color_mode() is True


class TestSetupLogging:
    """Test handler installation on the package logger."""

    def test_single_handler_on_rerun(self):
        setup_logging(CommonOptions())
        setup_logging(CommonOptions(verbose=1))

        package_logger = logging.getLogger("ignr")
        installed = [h for h in package_logger.handlers if getattr(h, "_ignr_handler", False)]
        assert len(installed) == 1
        assert package_logger.level == logging.INFO

    def test_quiet_disables_logging(self):
        setup_logging(CommonOptions(quiet=True))
        assert not logging.getLogger("ignr").isEnabledFor(logging.CRITICAL)


class TestRuntimeContext:
    """Test start-up of a CLI invocation."""

    def test_create_initialises_directories(self, tmp_path):
        runtime = RuntimeContext.create(CommonOptions(config=tmp_path / "config.yaml"))

        assert runtime.config_created is True
        assert runtime.paths.config_file.exists()
        assert runtime.paths.data_dir.is_dir()
        assert runtime.paths.cache_dir.is_dir()
        assert (runtime.paths.data_templates_dir / "rust.gitignore").exists()

    def test_existing_config_not_marked_created(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("detection:\n  max_depth: 2\n")

        runtime = RuntimeContext.create(CommonOptions(config=config_file))

        assert runtime.config_created is False
        assert runtime.config.detection.max_depth == 2

    def test_paths_override_from_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(f"paths:\n  data_dir: {tmp_path / 'data'}\n")

        runtime = RuntimeContext.create(CommonOptions(config=config_file))

        assert runtime.paths.data_dir == tmp_path / "data"
        assert (tmp_path / "data" / "templates" / "python.gitignore").exists()

    def test_dry_run_writes_nothing(self, tmp_path):
        runtime = RuntimeContext.create(CommonOptions(config=tmp_path / "cfg" / "config.yaml", dry_run=True))

        assert runtime.config_created is False
        assert not (tmp_path / "cfg").exists()
        assert not runtime.paths.data_dir.exists()

    def test_invalid_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("templates:\n  timeout: 0\n")

        with pytest.raises(ConfigurationError):
            RuntimeContext.create(CommonOptions(config=config_file))
