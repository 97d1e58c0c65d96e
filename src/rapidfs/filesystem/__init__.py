"""Storage backends for the rapidfs virtual filesystem.

Example:
    >>> from rapidfs.filesystem import MemoryBackend
    >>> vfs = MemoryBackend("/svc", {"/svc/123/files/a.txt": "hello"})
    >>> vfs.read_bytes(vfs.resolve("123/files/a.txt"))
    b'hello'
"""

from .base import VirtualFileSystem
from .disk import DiskBackend
from .handles import MemoryFileHandle, OsFileHandle, VirtualFile
from .memory import MemoryBackend
from .resolver import (
    DOMAINS_SUBDIR,
    DRAFTS_SUBDIR,
    ECMA_SUBDIR,
    PLUGINS_SUBDIR,
    RESOURCES_SUBDIR,
    TMP_SUBDIR,
    VERSIONS_SUBDIR,
    ensure_no_dot_segments,
    resolve,
)
from .stream import DirectoryStream

__all__ = [
    "VirtualFileSystem",
    "DiskBackend",
    "MemoryBackend",
    "VirtualFile",
    "OsFileHandle",
    "MemoryFileHandle",
    "DirectoryStream",
    "resolve",
    "ensure_no_dot_segments",
    "DOMAINS_SUBDIR",
    "RESOURCES_SUBDIR",
    "TMP_SUBDIR",
    "VERSIONS_SUBDIR",
    "DRAFTS_SUBDIR",
    "ECMA_SUBDIR",
    "PLUGINS_SUBDIR",
]
