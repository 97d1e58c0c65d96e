"""
Backend contract for the virtual filesystem.

A backend serves many services from a single root directory laid out as::

    services/
      domains/
        my-api.apps.example.com   - JSON descriptor: service id, version, draft flag
      123/
        files/                    - uploaded resources, served after permission checks
        plugins/
        .tmp/                     - staging area for uploads before they are saved
        versions/
          v1/
            schema.xml
            ecma/                 - scripts for this version
        drafts/
          v2/
            ...

``VirtualFileSystem`` owns path construction (every path is built through
``resolve``) and the text/descriptor helpers. Subclasses supply the storage
primitives: ``read``, ``open_with``, ``read_dir``, ``is_dir``, ``ensure_dir``,
``rename`` and ``remove``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePath
from typing import BinaryIO, List

from ..descriptor import TenantContext
from ..exceptions import (
    ContentEncodingError,
    DomainNotFoundError,
    SchemaFileNotFoundError,
    VfsError,
    VfsIOError,
    VirtualFileNotFoundError,
)
from .handles import VirtualFile
from .resolver import (
    DOMAINS_SUBDIR,
    DRAFTS_SUBDIR,
    ECMA_SUBDIR,
    PLUGINS_SUBDIR,
    RESOURCES_SUBDIR,
    TMP_SUBDIR,
    VERSIONS_SUBDIR,
    PathLike,
    ensure_no_dot_segments,
    resolve,
)
from .stream import DirectoryStream

logger = logging.getLogger(__name__)


def _is_missing(error: VfsError) -> bool:
    if isinstance(error, VirtualFileNotFoundError):
        return True
    return isinstance(error, VfsIOError) and isinstance(error.os_error, FileNotFoundError)


class VirtualFileSystem(ABC):
    """
    Base class for storage backends rooted at a fixed directory.

    Args:
        root: Absolute directory all paths are resolved under
        create_dirs: Whether the resource, plugin and tmp directory builders
            create their directory on first use
    """

    def __init__(self, root: PathLike, create_dirs: bool = True) -> None:
        self._root = Path(root)
        self.create_dirs = create_dirs

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, child: PathLike) -> Path:
        """Resolve a relative path under this backend's root."""
        return resolve(self._root, child)

    # ========== Storage primitives ==========

    @abstractmethod
    def read(self, path: Path) -> BinaryIO:
        """Open ``path`` for reading and return a binary stream."""

    @abstractmethod
    def open_with(self, path: Path, mode: str = "rb") -> VirtualFile:
        """Open a handle on ``path``."""

    @abstractmethod
    def read_dir(self, path: Path) -> List[Path]:
        """List the entries under ``path``."""

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        ...

    @abstractmethod
    def ensure_dir(self, path: Path) -> None:
        ...

    @abstractmethod
    def rename(self, src: Path, dst: Path) -> None:
        ...

    @abstractmethod
    def remove(self, path: Path) -> None:
        ...

    def read_bytes(self, path: Path) -> bytes:
        stream = self.read(path)
        try:
            return stream.read()
        except OSError as error:
            raise VfsIOError(f"Error reading {path}: {error}", os_error=error, path=path) from error
        finally:
            stream.close()

    # ========== Path builders ==========

    def _auto_dir(self, child: str) -> Path:
        path = self.resolve(child)
        if self.create_dirs:
            self.ensure_dir(path)
        return path

    def domain_file(self, domain: str) -> Path:
        return self.resolve(f"{DOMAINS_SUBDIR}/{domain}")

    def service_dir(self, service_id: int) -> Path:
        return self.resolve(str(service_id))

    def resource_dir(self, service_id: int) -> Path:
        return self._auto_dir(f"{service_id}/{RESOURCES_SUBDIR}")

    def plugins_dir(self, service_id: int) -> Path:
        return self._auto_dir(f"{service_id}/{PLUGINS_SUBDIR}")

    def tmp_dir(self, service_id: int) -> Path:
        return self._auto_dir(f"{service_id}/{TMP_SUBDIR}")

    def resource_file(self, service_id: int, name: PathLike) -> Path:
        return resolve(self.resource_dir(service_id), name)

    def schema_file(self, service_id: int, is_draft: bool, version: str, file: PathLike) -> Path:
        tree = DRAFTS_SUBDIR if is_draft else VERSIONS_SUBDIR
        file_str = file.as_posix() if isinstance(file, PurePath) else str(file)
        return self.resolve(f"{service_id}/{tree}/{version}/{file_str}")

    def ecma_dir(self, service_id: int, is_draft: bool, version: str) -> Path:
        tree = DRAFTS_SUBDIR if is_draft else VERSIONS_SUBDIR
        return self.resolve(f"{service_id}/{tree}/{version}/{ECMA_SUBDIR}")

    # ========== Descriptors and text files ==========

    def read_domain_descriptor(self, domain: str) -> TenantContext:
        """
        Load the descriptor for ``domain``.

        Raises:
            DomainNotFoundError: If no descriptor exists for the domain
            DescriptorParseError: If the descriptor exists but is malformed
            VfsIOError: For any other storage failure
        """
        path = self.domain_file(domain)
        try:
            data = self.read_bytes(path)
        except (VirtualFileNotFoundError, VfsIOError) as error:
            if _is_missing(error):
                raise DomainNotFoundError(domain, path=path) from error
            raise
        return TenantContext.from_json(data, source=domain)

    def write_domain_descriptor(self, domain: str, context: TenantContext) -> Path:
        """Persist ``context`` as the descriptor for ``domain``."""
        path = self.domain_file(domain)
        self.ensure_dir(path.parent)
        with self.open_with(path, "wb") as handle:
            handle.write(context.to_json())
        logger.info(f"Wrote descriptor for {domain} -> service {context.service_id}")
        return path

    def read_resource_file(self, service_id: int, name: PathLike) -> BinaryIO:
        return self.read(self.resource_file(service_id, name))

    def read_text(self, path: Path) -> str:
        data = self.read_bytes(path)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as error:
            raise ContentEncodingError(f"{path} is not valid UTF-8: {error.reason}", path=path) from error

    def read_schema_file(self, service_id: int, is_draft: bool, version: str, name: PathLike) -> str:
        """
        Read a schema file as UTF-8 text.

        Raises:
            SchemaFileNotFoundError: If the file does not exist
            ContentEncodingError: If the file is not valid UTF-8
        """
        path = self.schema_file(service_id, is_draft, version, name)
        try:
            return self.read_text(path)
        except (VirtualFileNotFoundError, VfsIOError) as error:
            if _is_missing(error):
                raise SchemaFileNotFoundError(
                    f"Schema file not found - {path}",
                    version=version,
                    is_draft=is_draft,
                    path=path,
                ) from error
            raise

    def read_ecma(self, service_id: int, is_draft: bool, version: str) -> DirectoryStream:
        return self.dir_stream(self.ecma_dir(service_id, is_draft, version))

    def dir_stream(self, directory: Path) -> DirectoryStream:
        """
        Start a lazy recursive listing of the files under ``directory``.

        Raises:
            DotPathsNotSupportedError: If ``directory`` contains '..'
        """
        if ".." in str(directory):
            logger.warning(f"Directory stream base cannot contain '..' - {directory}")
        ensure_no_dot_segments(directory, "stream")
        return DirectoryStream(self, directory)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(root={str(self._root)!r})"
