"""
Configuration Management Package

Provides Pydantic-based configuration models and management for ignr.
"""

from ignr.core.config.models import AppConfig, TemplatesConfig, DetectionConfig, PathsConfig
from ignr.core.config.manager import ConfigManager

__all__ = [
    "AppConfig",
    "TemplatesConfig",
    "DetectionConfig",
    "PathsConfig",
    "ConfigManager",
]
