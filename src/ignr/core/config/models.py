"""
Configuration Models

Pydantic models for type-safe configuration management with validation,
defaults, and field documentation.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ignr.utils import normalize_names


DEFAULT_TEMPLATE_URL = "https://www.toptal.com/developers/gitignore/api"


class TemplatesConfig(BaseModel):
    """Configuration for template sources and merging."""

    template_dir: Optional[str] = Field(
        default=None,
        description="Local directory containing custom .gitignore templates"
    )
    template_url: Optional[str] = Field(
        default=DEFAULT_TEMPLATE_URL,
        description="Remote URL to fetch templates from (gitignore.io compatible API)"
    )
    prefer_local: bool = Field(
        default=True,
        description="Prefer custom templates over synced and embedded ones"
    )
    always_include: List[str] = Field(
        default_factory=list,
        description="Templates to always include in generated .gitignore"
    )
    fetch_missing: bool = Field(
        default=False,
        description="Fetch templates that are not available locally from template_url"
    )
    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds"
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Maximum retry attempts for failed requests"
    )

    @field_validator('always_include')
    @classmethod
    def normalize_always_include(cls, v: List[str]) -> List[str]:
        """Template identifiers are case-insensitive plain file stems."""
        return normalize_names(v)

    @field_validator('template_url')
    @classmethod
    def validate_template_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate the remote template URL scheme."""
        if v is None or not v.strip():
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError("template_url must start with http:// or https://")
        return v.rstrip('/')


class DetectionConfig(BaseModel):
    """Configuration for stack detection."""

    max_depth: int = Field(
        default=10,
        ge=0,
        description="Maximum directory depth to scan for technology detection"
    )
    detect_os: bool = Field(
        default=True,
        description="Add the host operating system template"
    )
    detect_ide: bool = Field(
        default=True,
        description="Detect IDE/editor directories and add their templates"
    )


class PathsConfig(BaseModel):
    """Overrides for application directories."""

    data_dir: Optional[str] = Field(
        default=None,
        description="Data directory holding synced and embedded templates"
    )
    cache_dir: Optional[str] = Field(
        default=None,
        description="Cache directory holding individually fetched templates"
    )


class AppConfig(BaseModel):
    """
    Main application configuration model.

    Combines all configuration sections. Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
