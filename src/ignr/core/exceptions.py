"""
Core Exception Hierarchy for ignr

Provides error classification with error codes, recovery suggestions and
context information so the CLI can render actionable messages.
"""

import uuid
from enum import Enum
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class ErrorCode(Enum):
    """Standard error codes for different error categories."""

    # Network related errors (1000-1999)
    NETWORK_CONNECTION_FAILED = 1001
    NETWORK_TIMEOUT = 1002
    NETWORK_INVALID_RESPONSE = 1006

    # Configuration errors (3000-3999)
    CONFIG_INVALID_FORMAT = 3001
    CONFIG_MISSING_REQUIRED = 3002
    CONFIG_INVALID_VALUE = 3003
    CONFIG_ALREADY_EXISTS = 3007

    # File system errors (6000-6999)
    FS_INVALID_PATH = 6004
    FS_NOT_A_REPOSITORY = 6007

    # Generic/unknown errors (9000-9999)
    UNKNOWN_ERROR = 9000


@dataclass
class ErrorContext:
    """Contextual information about an error occurrence."""

    operation: str = ""
    url: Optional[str] = None
    file_path: Optional[str] = None
    correlation_id: Optional[str] = None
    user_context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            'operation': self.operation,
            'url': self.url,
            'file_path': self.file_path,
            'correlation_id': self.correlation_id,
            'user_context': self.user_context,
        }


@dataclass
class RecoverySuggestion:
    """Structured recovery suggestion for error resolution."""

    action: str  # Brief action description
    description: str  # Detailed explanation
    command: Optional[str] = None  # CLI command to resolve
    priority: int = 1  # Priority order (1=highest)

    def to_dict(self) -> Dict[str, Any]:
        """Convert suggestion to dictionary."""
        return {
            'action': self.action,
            'description': self.description,
            'command': self.command,
            'priority': self.priority,
        }


class IgnrError(Exception):
    """
    Base exception for all ignr errors.

    Carries an error code, recovery suggestions and context for the CLI
    error renderer.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        """
        Initialize ignr error.

        Args:
            message: Human-readable error description
            error_code: Standardized error code
            context: Contextual information about the error
            cause: Original exception that caused this error
            suggestions: List of recovery suggestions
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = list(suggestions or [])

        if not self.context.correlation_id:
            self.context.correlation_id = str(uuid.uuid4())[:8]

    def add_suggestion(self, suggestion: RecoverySuggestion) -> None:
        """Add a recovery suggestion to the error."""
        self.suggestions.append(suggestion)
        self.suggestions.sort(key=lambda s: s.priority)

    def to_dict(self) -> Dict[str, Any]:
        """Machine readable representation used by --json/--yaml output."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code.value,
            'context': self.context.to_dict(),
            'cause': str(self.cause) if self.cause else None,
            'suggestions': [s.to_dict() for s in self.suggestions],
        }


class NetworkError(IgnrError):
    """Exception for failures talking to the remote template source."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.NETWORK_CONNECTION_FAILED,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if url:
            context.url = url
            context.user_context['status_code'] = status_code

        kwargs['context'] = context
        kwargs['error_code'] = error_code

        super().__init__(message, **kwargs)

        self.add_suggestion(RecoverySuggestion(
            action="Check internet connection",
            description="Verify the template source is reachable and try again.",
            priority=1
        ))
        self.add_suggestion(RecoverySuggestion(
            action="Use local templates",
            description="Previously synced and embedded templates are still used by generate.",
            command="ignr generate",
            priority=2
        ))


class ConfigurationError(IgnrError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_INVALID_FORMAT,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if config_key:
            context.user_context['config_key'] = config_key
            context.user_context['config_value'] = config_value

        kwargs['context'] = context
        kwargs['error_code'] = error_code

        super().__init__(message, **kwargs)

        if error_code == ErrorCode.CONFIG_ALREADY_EXISTS:
            self.add_suggestion(RecoverySuggestion(
                action="Overwrite configuration",
                description="Re-run with --force to replace the existing file.",
                command="ignr init --force",
                priority=1
            ))
        elif error_code in (ErrorCode.CONFIG_INVALID_FORMAT, ErrorCode.CONFIG_INVALID_VALUE):
            self.add_suggestion(RecoverySuggestion(
                action="Reset configuration",
                description="Regenerate the default configuration file.",
                command="ignr config reset",
                priority=1
            ))
        elif error_code == ErrorCode.CONFIG_MISSING_REQUIRED:
            self.add_suggestion(RecoverySuggestion(
                action="Set the missing value",
                description="Add the value to the config file or pass it on the command line.",
                command="ignr config path",
                priority=1
            ))


class InvalidPathError(IgnrError):
    """Exception for directories that do not exist or are not directories."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = kwargs.get('context') or ErrorContext()
        if path:
            context.file_path = str(path)

        kwargs['context'] = context
        kwargs.setdefault('error_code', ErrorCode.FS_INVALID_PATH)

        super().__init__(message, **kwargs)


class NotAGitRepositoryError(IgnrError):
    """Raised when generate runs outside a git work tree without --force."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = kwargs.get('context') or ErrorContext()
        if path:
            context.file_path = str(path)

        kwargs['context'] = context
        kwargs['error_code'] = ErrorCode.FS_NOT_A_REPOSITORY

        super().__init__(message, **kwargs)

        self.add_suggestion(RecoverySuggestion(
            action="Force generation",
            description="Create the .gitignore anyway.",
            command="ignr generate --force",
            priority=1
        ))
        self.add_suggestion(RecoverySuggestion(
            action="Initialise a repository",
            description="Run git init in the project directory first.",
            command="git init",
            priority=2
        ))
