"""
Virtual Filesystem Exception Hierarchy

This module defines the exception hierarchy for rapidfs. Every error carries
the virtual path it concerns (when there is one), a stable error code for
programmatic handling, and an indication of whether the caller can do
anything about it.

The hierarchy separates:
1. Sandbox violations (absolute paths, dot segments, root escapes) which are
   never retried and never silently normalized
2. Lookup failures (domain, file, schema file) so callers can tell "missing"
   apart from "corrupt"
3. Wrapped storage failures, surfaced unmodified with the original error
   chained as ``__cause__``
"""

import time
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, Optional, Union


class ErrorAction(Enum):
    """What action can be taken for this error."""

    # Caller can fix the input and try again
    USER_FIXABLE = "user_fixable"

    # Request must be rejected as-is
    TERMINAL = "terminal"


class VfsError(Exception):
    """
    Base exception class for all virtual filesystem errors.

    Attributes:
        error_code: Unique error code for programmatic handling
        path: Virtual or resolved path the error concerns (if applicable)
        action: Whether the caller can fix and retry
        timestamp: When the error occurred
        context: Additional context information
        user_message: User-friendly error message
        developer_message: Detailed technical error message
        suggestion: Suggested fix or next steps (if applicable)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "VFS_ERROR",
        path: Optional[Union[str, PurePath]] = None,
        action: ErrorAction = ErrorAction.USER_FIXABLE,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.path = str(path) if path is not None else None
        self.action = action
        self.timestamp = time.time()
        self.context = context or {}
        self.user_message = user_message or message
        self.developer_message = message
        self.suggestion = suggestion

    @property
    def message(self) -> str:
        return self.developer_message

    @property
    def retryable(self) -> bool:
        return self.action is not ErrorAction.TERMINAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.developer_message,
            "user_message": self.user_message,
            "path": self.path,
            "action": self.action.value,
            "timestamp": self.timestamp,
            "context": self.context,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.developer_message}"


# =============================================================================
# LOOKUP ERRORS
# =============================================================================

class DomainNotFoundError(VfsError):
    """Raised when no descriptor record exists for a domain name."""

    def __init__(self, domain: str, **kwargs):
        self.domain = domain
        context = kwargs.pop("context", {})
        context["domain"] = domain
        super().__init__(
            kwargs.pop("message", f"Domain not found - {domain}"),
            error_code=kwargs.pop("error_code", "DOMAIN_NOT_FOUND"),
            context=context,
            user_message=f"No service is registered for '{domain}'.",
            **kwargs
        )


class VirtualFileNotFoundError(VfsError):
    """Raised when a path has no backing resource in the backend."""

    def __init__(self, message: str, **kwargs):
        error_code = kwargs.pop("error_code", "FILE_NOT_FOUND")
        super().__init__(message, error_code=error_code, **kwargs)


class SchemaFileNotFoundError(VirtualFileNotFoundError):
    """
    Raised when a schema file is missing from a version or draft directory.

    Examples:
    - ``schema.xml`` absent from ``<id>/versions/v1``
    - reading a draft file while the service only has published versions
    """

    def __init__(self, message: str, version: Optional[str] = None, is_draft: Optional[bool] = None, **kwargs):
        self.version = version
        self.is_draft = is_draft
        context = kwargs.pop("context", {})
        if version is not None:
            context["version"] = version
        if is_draft is not None:
            context["is_draft"] = is_draft
        super().__init__(
            message,
            error_code="SCHEMA_FILE_NOT_FOUND",
            context=context,
            suggestion="Check that the version (or draft) has been published with this file.",
            **kwargs
        )


# =============================================================================
# SANDBOX VIOLATIONS
# =============================================================================

class SandboxViolationError(VfsError):
    """Base class for inputs that would leave (or could leave) the root."""

    def __init__(self, message: str, **kwargs):
        error_code = kwargs.pop("error_code", "SANDBOX_VIOLATION")
        kwargs.setdefault("action", ErrorAction.TERMINAL)
        super().__init__(message, error_code=error_code, **kwargs)


class AbsolutePathNotSupportedError(SandboxViolationError):
    """Raised when a caller passes an absolute path where a relative one is required."""

    def __init__(self, path: Union[str, PurePath], **kwargs):
        super().__init__(
            kwargs.pop("message", f"Absolute file paths not supported - {path}"),
            error_code="ABSOLUTE_PATH_NOT_SUPPORTED",
            path=path,
            user_message="Paths must be relative to the service directory.",
            **kwargs
        )


class DotPathsNotSupportedError(SandboxViolationError):
    """
    Raised when a path contains '..' or './' segments or escapes the root.

    Such paths are rejected outright; they are never normalized.
    """

    def __init__(self, path: Union[str, PurePath], **kwargs):
        super().__init__(
            kwargs.pop("message", f"Dot paths not supported - {path}"),
            error_code="DOT_PATHS_NOT_SUPPORTED",
            path=path,
            user_message="Paths may not contain '..' or './' segments.",
            **kwargs
        )


# =============================================================================
# CONTENT AND STORAGE ERRORS
# =============================================================================

class DescriptorParseError(VfsError):
    """Raised when a domain descriptor exists but cannot be parsed."""

    def __init__(self, message: str, raw_content: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if raw_content is not None:
            context["raw_content"] = raw_content[:200] + "..." if len(raw_content) > 200 else raw_content
        super().__init__(
            message,
            error_code="DESCRIPTOR_PARSE_ERROR",
            context=context,
            suggestion='Descriptors must be JSON objects: {"service_id": 1, "version": "v1", "is_draft": false}',
            **kwargs
        )


class VfsIOError(VfsError):
    """
    Wraps an ``OSError`` raised by the underlying storage.

    The original error is kept on ``os_error`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, os_error: Optional[OSError] = None, **kwargs):
        self.os_error = os_error
        context = kwargs.pop("context", {})
        if os_error is not None:
            context["errno"] = os_error.errno
            context["strerror"] = os_error.strerror
        super().__init__(message, error_code="IO_ERROR", context=context, **kwargs)

    @property
    def errno(self) -> Optional[int]:
        return self.os_error.errno if self.os_error is not None else None


class PathEncodingError(VfsError):
    """Raised when a path or file name cannot be represented on the target store."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="PATH_ENCODING_ERROR", **kwargs)


class ContentEncodingError(VfsError):
    """Raised when text content (schemas, scripts) is not valid UTF-8."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CONTENT_ENCODING_ERROR", **kwargs)


class PathArithmeticError(VfsError):
    """Raised when a path cannot be re-expressed relative to a tenant directory."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("action", ErrorAction.TERMINAL)
        super().__init__(message, error_code="PATH_ARITHMETIC_ERROR", **kwargs)


class VfsConfigurationError(VfsError):
    """Raised for invalid filesystem configuration."""

    def __init__(self, message: str, config_field: Optional[str] = None, config_value: Any = None, **kwargs):
        self.config_field = config_field
        self.config_value = config_value
        context = kwargs.pop("context", {})
        if config_field:
            context["config_field"] = config_field
        if config_value is not None:
            context["config_value"] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", context=context, **kwargs)
