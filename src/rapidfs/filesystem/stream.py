"""Lazy depth-first file enumeration over any backend."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Tuple

if TYPE_CHECKING:
    from .base import VirtualFileSystem

logger = logging.getLogger(__name__)


class DirectoryStream:
    """
    Iterator over every file below a base directory.

    Yields ``(relative_path, absolute_path)`` pairs. Listings are kept on an
    explicit stack: a subdirectory's listing is pushed when it is met and
    popped once exhausted, so traversal is depth-first without recursion.
    Directories themselves are never yielded.

    Entries are skipped rather than failing the whole traversal when their
    path contains '..' or they do not lie under the base (a memory backend
    listing can return unrelated keys). Skipped paths are kept in ``skipped``.

    The stream is single-pass and must be consumed by one caller at a time.
    """

    def __init__(self, backend: "VirtualFileSystem", base: Path):
        self.backend = backend
        self.base = base
        self._stack: List[Iterator[Path]] = [iter(backend.read_dir(base))]
        self._skipped: List[Path] = []

    @property
    def skipped(self) -> Tuple[Path, ...]:
        return tuple(self._skipped)

    @property
    def exhausted(self) -> bool:
        return not self._stack

    def __iter__(self) -> "DirectoryStream":
        return self

    def __next__(self) -> Tuple[Path, Path]:
        while self._stack:
            try:
                path = next(self._stack[-1])
            except StopIteration:
                self._stack.pop()
                continue

            if ".." in str(path):
                logger.warning(f"Skipping path {path} because it contains '..'")
                self._skipped.append(path)
                continue

            if self.backend.is_dir(path):
                self._stack.append(iter(self.backend.read_dir(path)))
                continue

            if path != self.base and path.is_relative_to(self.base):
                return path.relative_to(self.base), path

            # not under the base: unrelated listing entry
            logger.debug(f"Skipping {path}, outside of {self.base}")
            self._skipped.append(path)

        raise StopIteration
