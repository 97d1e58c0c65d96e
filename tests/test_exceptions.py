"""
Tests for the rapidfs exception hierarchy.

This module tests:
- Base VfsError fields and serialization
- Error codes and actions on each concrete error
- Context capture (domain, version, errno, config field)
"""

import errno

import pytest

from rapidfs.exceptions import (
    AbsolutePathNotSupportedError,
    ContentEncodingError,
    DescriptorParseError,
    DomainNotFoundError,
    DotPathsNotSupportedError,
    ErrorAction,
    PathArithmeticError,
    PathEncodingError,
    SandboxViolationError,
    SchemaFileNotFoundError,
    VfsConfigurationError,
    VfsError,
    VfsIOError,
    VirtualFileNotFoundError,
)


# =============================================================================
# Base Error
# =============================================================================

class TestVfsError:
    """Test cases for the base VfsError class."""

    def test_basic_error_creation(self):
        """Test creating a basic error."""
        error = VfsError("Something broke")

        assert error.message == "Something broke"
        assert error.error_code == "VFS_ERROR"
        assert error.path is None
        assert error.action is ErrorAction.USER_FIXABLE
        assert error.retryable
        assert str(error) == "[VFS_ERROR] Something broke"

    def test_path_is_stringified(self, tmp_path):
        error = VfsError("x", path=tmp_path / "a")

        assert error.path == str(tmp_path / "a")

    def test_to_dict(self):
        """Test serialization for logging."""
        error = VfsError("msg", error_code="CODE", context={"k": 1}, suggestion="try again")

        data = error.to_dict()

        assert data["error_type"] == "VfsError"
        assert data["error_code"] == "CODE"
        assert data["context"] == {"k": 1}
        assert data["action"] == "user_fixable"
        assert data["suggestion"] == "try again"
        assert isinstance(data["timestamp"], float)


# =============================================================================
# Sandbox Violations
# =============================================================================

class TestSandboxErrors:
    """Test cases for sandbox violations."""

    @pytest.mark.parametrize("cls", [AbsolutePathNotSupportedError, DotPathsNotSupportedError])
    def test_sandbox_errors_are_terminal(self, cls):
        error = cls("/etc/passwd")

        assert isinstance(error, SandboxViolationError)
        assert error.action is ErrorAction.TERMINAL
        assert not error.retryable
        assert error.path == "/etc/passwd"

    def test_error_codes(self):
        assert AbsolutePathNotSupportedError("/a").error_code == "ABSOLUTE_PATH_NOT_SUPPORTED"
        assert DotPathsNotSupportedError("../a").error_code == "DOT_PATHS_NOT_SUPPORTED"

    def test_custom_message(self):
        error = DotPathsNotSupportedError("a/../b", message="Cannot open a/../b")

        assert error.message == "Cannot open a/../b"
        assert "'..'" in error.user_message


# =============================================================================
# Lookup Errors
# =============================================================================

class TestLookupErrors:
    """Test cases for missing domains and files."""

    def test_domain_not_found(self):
        error = DomainNotFoundError("x.apps.example.com")

        assert error.domain == "x.apps.example.com"
        assert error.context["domain"] == "x.apps.example.com"
        assert error.error_code == "DOMAIN_NOT_FOUND"

    def test_schema_file_not_found_is_file_not_found(self):
        error = SchemaFileNotFoundError("missing", version="v3", is_draft=True)

        assert isinstance(error, VirtualFileNotFoundError)
        assert error.error_code == "SCHEMA_FILE_NOT_FOUND"
        assert error.context == {"version": "v3", "is_draft": True}
        assert error.suggestion


# =============================================================================
# Content and Storage Errors
# =============================================================================

class TestStorageErrors:
    """Test cases for wrapped storage failures."""

    def test_io_error_keeps_os_error(self):
        os_error = FileNotFoundError(errno.ENOENT, "No such file or directory")

        error = VfsIOError("read failed", os_error=os_error)

        assert error.os_error is os_error
        assert error.errno == errno.ENOENT
        assert error.context["strerror"] == "No such file or directory"

    def test_io_error_without_os_error(self):
        assert VfsIOError("plain").errno is None

    def test_path_arithmetic_is_terminal(self):
        assert PathArithmeticError("outside").action is ErrorAction.TERMINAL

    @pytest.mark.parametrize(
        "error,code",
        [
            (PathEncodingError("p"), "PATH_ENCODING_ERROR"),
            (ContentEncodingError("c"), "CONTENT_ENCODING_ERROR"),
            (DescriptorParseError("d"), "DESCRIPTOR_PARSE_ERROR"),
            (VirtualFileNotFoundError("f"), "FILE_NOT_FOUND"),
        ],
    )
    def test_error_codes(self, error, code):
        assert error.error_code == code
        assert isinstance(error, VfsError)

    def test_configuration_error(self):
        error = VfsConfigurationError("bad backend", config_field="backend", config_value="s3")

        assert error.config_field == "backend"
        assert error.context == {"config_field": "backend", "config_value": "s3"}
