"""Lexical path sandboxing.

All paths handed to a backend are built by joining a caller-supplied relative
path onto a fixed root. The containment check is a string-prefix comparison on
the joined path, never a filesystem canonicalization, so it works for paths
that do not exist yet and for the in-memory backend.

Symlinks inside a disk tree are not followed here; a link pointing outside the
root is not detected.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath, PurePosixPath
from typing import Union

from ..exceptions import (
    AbsolutePathNotSupportedError,
    DotPathsNotSupportedError,
    PathEncodingError,
)

DOMAINS_SUBDIR = "domains"
RESOURCES_SUBDIR = "files"
TMP_SUBDIR = ".tmp"
VERSIONS_SUBDIR = "versions"
DRAFTS_SUBDIR = "drafts"
ECMA_SUBDIR = "ecma"
PLUGINS_SUBDIR = "plugins"

PathLike = Union[str, PurePath]


def _is_absolute(child: str) -> bool:
    # "/x" and "\x" are rooted but not absolute on Windows
    return Path(child).is_absolute() or PurePosixPath(child).is_absolute() or child.startswith("\\")


def resolve(root: Path, child: PathLike) -> Path:
    """
    Join a relative path onto root, rejecting anything that could escape it.

    Args:
        root: Absolute base directory
        child: Caller-supplied relative path

    Returns:
        The joined path, guaranteed to start with ``str(root)``

    Raises:
        AbsolutePathNotSupportedError: If child is absolute (joining would discard root)
        DotPathsNotSupportedError: If child contains './' or '..', or the join escapes root
        PathEncodingError: If child cannot be encoded as an OS path
    """
    child_str = child.as_posix() if isinstance(child, PurePath) else str(child)

    if _is_absolute(child_str):
        raise AbsolutePathNotSupportedError(child_str)
    if "./" in child_str or ".." in child_str:
        raise DotPathsNotSupportedError(child_str)
    if "\x00" in child_str:
        raise PathEncodingError(f"Path contains a NUL byte - {child_str!r}", path=child_str.replace("\x00", "\\0"))
    try:
        os.fsencode(child_str)
    except UnicodeEncodeError as error:
        raise PathEncodingError(f"Path cannot be encoded - {child_str!r}: {error.reason}") from error

    resolved = root / child_str
    if not str(resolved).startswith(str(root)):
        raise DotPathsNotSupportedError(
            child_str,
            message=f"Path escapes root {root} - {child_str}",
        )
    return resolved


def ensure_no_dot_segments(path: PathLike, action: str = "access") -> None:
    """Reject a resolved path that still carries a '..' segment.

    Raises:
        DotPathsNotSupportedError: If the path's string form contains '..'
    """
    if ".." in str(path):
        raise DotPathsNotSupportedError(
            path,
            message=f"Cannot {action} path with .. in it - {path}",
        )
