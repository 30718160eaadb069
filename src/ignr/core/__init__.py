"""
Core ignr Package

Stack detection, template resolution, .gitignore rendering, configuration
and error handling.
"""

from ignr.core.exceptions import (
    IgnrError,
    NetworkError,
    ConfigurationError,
    InvalidPathError,
    NotAGitRepositoryError,
    ErrorCode,
    ErrorContext,
    RecoverySuggestion
)

__all__ = [
    'IgnrError',
    'NetworkError',
    'ConfigurationError',
    'InvalidPathError',
    'NotAGitRepositoryError',
    'ErrorCode',
    'ErrorContext',
    'RecoverySuggestion',
]
