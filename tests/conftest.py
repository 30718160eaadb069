"""
Shared Test Configuration and Fixtures

Isolates every test from the user's real XDG directories and IGNR_*
environment, and provides template directories and projects to scan.
"""

import os
import logging
from pathlib import Path

import pytest

from ignr.core.config.models import TemplatesConfig
from ignr.core.paths import AppPaths
from ignr.core.templates import TemplateManager


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point HOME and the XDG base directories into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg" / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg" / "data"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg" / "cache"))
    for name in list(os.environ):
        if name.startswith("IGNR_"):
            monkeypatch.delenv(name)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    yield tmp_path

    package_logger = logging.getLogger("ignr")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def app_paths(tmp_path) -> AppPaths:
    return AppPaths(
        config_file=tmp_path / "config" / "config.yaml",
        data_dir=tmp_path / "data",
        cache_dir=tmp_path / "cache",
    )


@pytest.fixture
def custom_dir(tmp_path) -> Path:
    """Custom template directory with two small overlapping templates."""
    directory = tmp_path / "custom"
    directory.mkdir()
    (directory / "alpha.gitignore").write_text("*.alpha\nshared/\n", encoding="utf-8")
    (directory / "beta.gitignore").write_text("shared/\n\n*.beta\n", encoding="utf-8")
    return directory


@pytest.fixture
def template_manager(app_paths, custom_dir) -> TemplateManager:
    return TemplateManager(TemplatesConfig(template_dir=str(custom_dir)), app_paths)


@pytest.fixture
def project(tmp_path) -> Path:
    """A git work tree containing a Python project."""
    root = tmp_path / "project"
    root.mkdir()
    (root / ".git").mkdir()
    (root / "pyproject.toml").write_text("[project]\nname = 'demo'\n", encoding="utf-8")
    (root / "src").mkdir()
    (root / "src" / "demo.py").write_text("print('hi')\n", encoding="utf-8")
    return root
