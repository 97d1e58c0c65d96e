"""
File handles returned by backend ``open_with`` calls.

Both variants expose the same binary file-like surface (read/write/seek/tell/
flush/close), the backing ``path``, and ``clone()``. A clone never aliases the
original: a disk handle reopens its own descriptor, a memory handle copies its
buffer.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Optional

from ..exceptions import VfsIOError

if TYPE_CHECKING:
    from ..tenant import TenantBinding
    from .memory import MemoryBackend

logger = logging.getLogger(__name__)


class VirtualFile(ABC):
    """Capability shared by every handle, regardless of backend."""

    @property
    @abstractmethod
    def path(self) -> Path:
        """Absolute path of the backing resource."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        ...

    @abstractmethod
    def read(self, size: int = -1) -> bytes:
        ...

    @abstractmethod
    def write(self, data: bytes) -> int:
        ...

    @abstractmethod
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        ...

    @abstractmethod
    def tell(self) -> int:
        ...

    @abstractmethod
    def flush(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    def clone(self) -> "VirtualFile":
        """Return an independent handle on the same resource."""

    @abstractmethod
    def _relocate(self, path: Path) -> None:
        """Point the handle at ``path`` after its resource was renamed there."""

    def readall(self) -> bytes:
        return self.read(-1)

    def save_to(self, binding: "TenantBinding", new_name: Optional[str] = None) -> str:
        """Move this handle's resource into the tenant's resource directory."""
        return binding.save_to(self, new_name)

    def discard(self, binding: "TenantBinding") -> None:
        """Delete this handle's backing resource."""
        binding.discard(self)

    def __enter__(self) -> "VirtualFile":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<{self.__class__.__name__} path={str(self.path)!r} {state}>"


class OsFileHandle(VirtualFile):
    """Handle over a real OS file object."""

    def __init__(self, file: BinaryIO, path: Path):
        self._file = file
        self._path = path

    @classmethod
    def open(cls, path: Path, mode: str = "rb") -> "OsFileHandle":
        """
        Open ``path`` with ``mode`` passed straight through to the OS.

        Raises:
            VfsIOError: If the OS refuses the open
        """
        try:
            file = open(path, mode)
        except OSError as error:
            raise VfsIOError(f"Cannot open {path} ({mode}): {error}", os_error=error, path=path) from error
        return cls(file, path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file.closed

    def read(self, size: int = -1) -> bytes:
        return self._file.read(size)

    def write(self, data: bytes) -> int:
        return self._file.write(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.close()

    def clone(self) -> "OsFileHandle":
        return OsFileHandle.open(self._path, "rb")

    def _relocate(self, path: Path) -> None:
        # the descriptor follows the renamed file; only the name changes
        self._path = path


class MemoryFileHandle(VirtualFile):
    """
    Handle over a private copy of a memory backend record.

    Writes overwrite at the current offset and extend the buffer. The buffer is
    committed back to the backend on ``flush()`` and ``close()`` when it has
    been modified, so nothing written is visible to other readers before then.
    """

    def __init__(self, backend: "MemoryBackend", path: Path, data: bytes = b""):
        self._backend = backend
        self._path = path
        self._data = bytearray(data)
        self._offset = 0
        self._dirty = False
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError(f"I/O operation on closed file: {self._path}")

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        start = self._offset
        if size is None or size < 0:
            end = len(self._data)
        else:
            end = min(start + size, len(self._data))
        if start >= end:
            return b""
        self._offset = end
        return bytes(self._data[start:end])

    def write(self, data: bytes) -> int:
        self._check_open()
        chunk = bytes(data)
        end = self._offset + len(chunk)
        self._data[self._offset:end] = chunk
        self._offset = end
        self._dirty = True
        return len(chunk)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move the offset, clamped to ``[0, len(buffer)]``.

        Args:
            offset: Byte offset relative to ``whence``
            whence: ``io.SEEK_SET``, ``io.SEEK_CUR`` or ``io.SEEK_END``

        Returns:
            The new absolute offset
        """
        self._check_open()
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._offset + offset
        elif whence == io.SEEK_END:
            target = len(self._data) + offset
        else:
            raise ValueError(f"Invalid whence ({whence}, should be 0, 1 or 2)")
        self._offset = max(0, min(target, len(self._data)))
        return self._offset

    def tell(self) -> int:
        self._check_open()
        return self._offset

    def flush(self) -> None:
        self._check_open()
        if self._dirty:
            self._backend.store(self._path, bytes(self._data))
            self._dirty = False
            logger.debug(f"Committed {len(self._data)} bytes to {self._path}")

    def close(self) -> None:
        if self._closed:
            return
        self.flush()
        self._closed = True

    def _relocate(self, path: Path) -> None:
        self._path = path

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def clone(self) -> "MemoryFileHandle":
        return MemoryFileHandle(self._backend, self._path, bytes(self._data))
