"""
rapidfs - sandboxed virtual filesystem for multi-tenant services

Gives request handlers and script runtimes convention-based access to
per-service file trees (schemas, versions and drafts, scripts, uploaded
resources, plugins) on disk or in memory, with every path kept under a
single services root.
"""

__version__ = "0.1.0"

from .config import VfsConfig, bind_domain, create_vfs
from .descriptor import TenantContext
from .exceptions import (
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
from .filesystem import (
    DirectoryStream,
    DiskBackend,
    MemoryBackend,
    MemoryFileHandle,
    OsFileHandle,
    VirtualFile,
    VirtualFileSystem,
    resolve,
)
from .tenant import TenantBinding
from .utils import init_vfs_logging

__all__ = [
    # Version
    "__version__",
    # Backends
    "VirtualFileSystem",
    "DiskBackend",
    "MemoryBackend",
    "resolve",
    # Handles and traversal
    "VirtualFile",
    "OsFileHandle",
    "MemoryFileHandle",
    "DirectoryStream",
    # Tenants
    "TenantContext",
    "TenantBinding",
    # Configuration
    "VfsConfig",
    "create_vfs",
    "bind_domain",
    "init_vfs_logging",
    # Errors
    "VfsError",
    "ErrorAction",
    "DomainNotFoundError",
    "VirtualFileNotFoundError",
    "SchemaFileNotFoundError",
    "SandboxViolationError",
    "AbsolutePathNotSupportedError",
    "DotPathsNotSupportedError",
    "DescriptorParseError",
    "VfsIOError",
    "PathEncodingError",
    "ContentEncodingError",
    "PathArithmeticError",
    "VfsConfigurationError",
]
