"""
Tests for Configuration Models

Tests the Pydantic configuration models for validation and defaults.
"""

import pytest
from pydantic import ValidationError

from ignr.core.config.models import (
    DEFAULT_TEMPLATE_URL,
    AppConfig,
    DetectionConfig,
    PathsConfig,
    TemplatesConfig,
)


class TestTemplatesConfig:
    """Test TemplatesConfig validation and defaults."""

    def test_default_values(self):
        config = TemplatesConfig()

        assert config.template_dir is None
        assert config.template_url == DEFAULT_TEMPLATE_URL
        assert config.prefer_local is True
        assert config.always_include == []
        assert config.fetch_missing is False
        assert config.timeout == 30
        assert config.max_retries == 2

    def test_always_include_is_normalized(self):
        config = TemplatesConfig(always_include=[" MacOS", "vscode ", "", "  "])
        assert config.always_include == ["macos", "vscode"]

    def test_always_include_drops_path_like_names(self):
        config = TemplatesConfig(always_include=["../secrets", "rust", "a/b"])
        assert config.always_include == ["rust"]

    def test_template_url_trailing_slash_removed(self):
        config = TemplatesConfig(template_url="https://example.com/api/")
        assert config.template_url == "https://example.com/api"

    def test_empty_template_url_disables_remote(self):
        assert TemplatesConfig(template_url="").template_url is None

    def test_template_url_requires_http_scheme(self):
        with pytest.raises(ValidationError) as exc_info:
            TemplatesConfig(template_url="ftp://example.com")
        assert "http://" in str(exc_info.value)

    @pytest.mark.parametrize("timeout", [0, 301])
    def test_timeout_bounds(self, timeout):
        with pytest.raises(ValidationError):
            TemplatesConfig(timeout=timeout)


class TestDetectionConfig:
    """Test DetectionConfig validation and defaults."""

    def test_default_values(self):
        config = DetectionConfig()
        assert config.max_depth == 10
        assert config.detect_os is True
        assert config.detect_ide is True

    def test_zero_depth_allowed(self):
        assert DetectionConfig(max_depth=0).max_depth == 0

    def test_negative_depth_rejected(self):
        with pytest.raises(ValidationError):
            DetectionConfig(max_depth=-1)


class TestAppConfig:
    """Test the combined configuration model."""

    def test_sections_created_by_default(self):
        config = AppConfig()
        assert isinstance(config.templates, TemplatesConfig)
        assert isinstance(config.detection, DetectionConfig)
        assert isinstance(config.paths, PathsConfig)
        assert config.paths.data_dir is None

    def test_nested_dict_input(self):
        config = AppConfig(
            templates={"always_include": ["Rust"]},
            detection={"max_depth": 3},
            paths={"cache_dir": "/tmp/ignr-cache"},
        )
        assert config.templates.always_include == ["rust"]
        assert config.detection.max_depth == 3
        assert config.paths.cache_dir == "/tmp/ignr-cache"

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            AppConfig(output={"format": "json"})
