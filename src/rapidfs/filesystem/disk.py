"""Disk-backed virtual filesystem."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, List

from ..exceptions import VfsIOError
from .base import VirtualFileSystem
from .handles import OsFileHandle
from .resolver import PathLike, ensure_no_dot_segments

logger = logging.getLogger(__name__)


class DiskBackend(VirtualFileSystem):
    """
    Backend rooted at a host directory.

    Open modes are handed to the OS unchanged, so opening a missing file
    without a creating mode ('w', 'a', 'x') fails. Exclusion between
    concurrent writers is left to the operating system.

    Example:
        >>> vfs = DiskBackend("/srv/services")
        >>> vfs.resolve("123/files/a.png")
        PosixPath('/srv/services/123/files/a.png')
    """

    def __init__(self, services_dir: PathLike, create_dirs: bool = True) -> None:
        super().__init__(services_dir, create_dirs=create_dirs)
        logger.debug(f"DiskBackend rooted at {self.root}")

    def read(self, path: Path) -> BinaryIO:
        ensure_no_dot_segments(path, "read")
        try:
            return open(path, "rb")
        except OSError as error:
            raise VfsIOError(f"Cannot read {path}: {error}", os_error=error, path=path) from error

    def open_with(self, path: Path, mode: str = "rb") -> OsFileHandle:
        ensure_no_dot_segments(path, "open")
        if "b" not in mode:
            raise ValueError(f"Handles are binary only, got mode '{mode}'")
        return OsFileHandle.open(path, mode)

    def read_dir(self, path: Path) -> List[Path]:
        ensure_no_dot_segments(path, "read dir")
        try:
            return sorted(path.iterdir())
        except OSError as error:
            raise VfsIOError(f"Cannot list {path}: {error}", os_error=error, path=path) from error

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def ensure_dir(self, path: Path) -> None:
        ensure_no_dot_segments(path, "create")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise VfsIOError(f"Cannot create directory {path}: {error}", os_error=error, path=path) from error

    def rename(self, src: Path, dst: Path) -> None:
        ensure_no_dot_segments(src, "rename")
        ensure_no_dot_segments(dst, "rename")
        try:
            src.replace(dst)
        except OSError as error:
            raise VfsIOError(f"Cannot rename {src} to {dst}: {error}", os_error=error, path=src) from error
        logger.debug(f"Renamed {src} -> {dst}")

    def remove(self, path: Path) -> None:
        ensure_no_dot_segments(path, "remove")
        try:
            path.unlink()
        except OSError as error:
            raise VfsIOError(f"Cannot remove {path}: {error}", os_error=error, path=path) from error
        logger.debug(f"Removed {path}")
