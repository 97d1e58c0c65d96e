"""In-memory virtual filesystem, for tests and non-production use."""

from __future__ import annotations

import io
import logging
import threading
from pathlib import Path
from typing import BinaryIO, Dict, List, Mapping, Optional, Union

from ..exceptions import VirtualFileNotFoundError
from .base import VirtualFileSystem
from .handles import MemoryFileHandle
from .resolver import PathLike, ensure_no_dot_segments

logger = logging.getLogger(__name__)


class MemoryBackend(VirtualFileSystem):
    """
    Backend storing file contents in a dict keyed by absolute path string.

    Keys must start with the root (e.g. ``"/private/services/123/versions/v1/schema.xml"``).
    Directories are implicit: a directory exists whenever some key lies below it.

    Differences from the disk backend:
    - ``open_with`` ignores the mode and creates an empty record when the key is absent
    - ``read_dir`` returns every key under the directory, flattening subtrees

    All access to the mapping is guarded by a re-entrant lock so one instance
    can be shared between threads.
    """

    def __init__(
        self,
        root: PathLike,
        data: Optional[Mapping[str, Union[str, bytes]]] = None,
        create_dirs: bool = True,
    ) -> None:
        super().__init__(root, create_dirs=create_dirs)
        self._lock = threading.RLock()
        self._data: Dict[str, bytes] = {}
        for key, value in (data or {}).items():
            self._data[str(key)] = value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def store(self, path: PathLike, content: bytes) -> None:
        """Replace the record at ``path``."""
        with self._lock:
            self._data[str(path)] = bytes(content)

    def snapshot(self) -> Dict[str, bytes]:
        with self._lock:
            return dict(self._data)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return str(path) in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def read(self, path: Path) -> BinaryIO:
        ensure_no_dot_segments(path, "read")
        with self._lock:
            content = self._data.get(str(path))
        if content is None:
            raise VirtualFileNotFoundError(f"File not found - {path}", path=path)
        return io.BytesIO(content)

    def open_with(self, path: Path, mode: str = "rb") -> MemoryFileHandle:
        ensure_no_dot_segments(path, "open")
        key = str(path)
        with self._lock:
            content = self._data.get(key)
            if content is None:
                self._data[key] = b""
                content = b""
                logger.debug(f"Created empty record {key}")
        return MemoryFileHandle(self, path, content)

    def read_dir(self, path: Path) -> List[Path]:
        ensure_no_dot_segments(path, "read dir")
        prefix = str(path)
        with self._lock:
            keys = [key for key in self._data if key.startswith(prefix) and key != prefix]
        return [Path(key) for key in sorted(keys)]

    def is_dir(self, path: Path) -> bool:
        key = str(path)
        below = key.rstrip("/") + "/"
        with self._lock:
            if key in self._data:
                return False
            return any(existing.startswith(below) for existing in self._data)

    def ensure_dir(self, path: Path) -> None:
        # directories are implicit
        ensure_no_dot_segments(path, "create")

    def rename(self, src: Path, dst: Path) -> None:
        ensure_no_dot_segments(src, "rename")
        ensure_no_dot_segments(dst, "rename")
        with self._lock:
            if str(src) not in self._data:
                raise VirtualFileNotFoundError(f"Cannot rename missing file - {src}", path=src)
            self._data[str(dst)] = self._data.pop(str(src))
        logger.debug(f"Renamed {src} -> {dst}")

    def remove(self, path: Path) -> None:
        ensure_no_dot_segments(path, "remove")
        with self._lock:
            if self._data.pop(str(path), None) is None:
                raise VirtualFileNotFoundError(f"Cannot remove missing file - {path}", path=path)
        logger.debug(f"Removed {path}")
