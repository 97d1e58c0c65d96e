"""
Per-tenant view over a shared backend.

A ``TenantBinding`` pins every operation to one service id and one version
(or draft) so request handlers and script runtimes never build service paths
themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath, PurePosixPath
from typing import Any, Dict, Optional

from .descriptor import TenantContext
from .exceptions import (
    AbsolutePathNotSupportedError,
    DotPathsNotSupportedError,
    PathArithmeticError,
    PathEncodingError,
)
from .filesystem.base import VirtualFileSystem
from .filesystem.handles import VirtualFile
from .filesystem.resolver import TMP_SUBDIR, PathLike, resolve
from .filesystem.stream import DirectoryStream

logger = logging.getLogger(__name__)


def normalize_virtual_path(path: PathLike) -> str:
    """
    Prepare caller input for resolution.

    Strips a single leading './' and rejects '..' and absolute paths. The
    resolver repeats these checks; rejecting here keeps the error attached to
    what the caller actually passed.

    Raises:
        DotPathsNotSupportedError: If the path contains '..'
        AbsolutePathNotSupportedError: If the path is absolute
    """
    text = path.as_posix() if isinstance(path, PurePath) else str(path)
    if text.startswith("./"):
        text = text[2:]
    if ".." in text:
        raise DotPathsNotSupportedError(
            text,
            message=f"Cannot open file with .. in path {text}",
        )
    if PurePosixPath(text).is_absolute() or Path(text).is_absolute():
        raise AbsolutePathNotSupportedError(text)
    return text


class TenantBinding:
    """
    Binds a backend to one (service id, version, draft) context.

    The context is fixed for the binding's lifetime; build a new binding to
    serve another version. The backend may be shared by any number of
    bindings.

    Example:
        >>> binding = TenantBinding.for_domain(DiskBackend("/srv/services"), "music.apps.example.com")
        >>> binding.read_schema_file("schema.xml")
        '<?xml version="1.0"?>...'
    """

    def __init__(self, context: TenantContext, vfs: VirtualFileSystem):
        self._context = context
        self.vfs = vfs
        self._log_extra = {"service_id": context.service_id}

    @classmethod
    def for_domain(cls, vfs: VirtualFileSystem, domain: str) -> "TenantBinding":
        """Load the descriptor for ``domain`` and bind to it."""
        return cls(vfs.read_domain_descriptor(domain), vfs)

    @property
    def context(self) -> TenantContext:
        return self._context

    @property
    def service_id(self) -> int:
        return self._context.service_id

    @property
    def version(self) -> str:
        return self._context.version

    @property
    def is_draft(self) -> bool:
        return self._context.is_draft

    # ========== Schema and scripts ==========

    def read_schema_file(self, name: PathLike) -> str:
        logger.debug(f"Reading schema file {name}", extra=self._log_extra)
        return self.vfs.read_schema_file(self.service_id, self.is_draft, self.version, name)

    def ecma_dir(self) -> Path:
        return self.vfs.ecma_dir(self.service_id, self.is_draft, self.version)

    def ecma_files(self) -> DirectoryStream:
        return self.vfs.read_ecma(self.service_id, self.is_draft, self.version)

    def read_ecma_file(self, path: PathLike) -> str:
        target = resolve(self.ecma_dir(), normalize_virtual_path(path))
        logger.debug(f"Reading script {target}", extra=self._log_extra)
        return self.vfs.read_text(target)

    # ========== Resources and plugins ==========

    def resource_dir(self) -> Path:
        return self.vfs.resource_dir(self.service_id)

    def plugins_dir(self) -> Path:
        return self.vfs.plugins_dir(self.service_id)

    def tmp_dir(self) -> Path:
        return self.vfs.tmp_dir(self.service_id)

    def resolve_resource(self, path: PathLike) -> Path:
        """Absolute path of a resource file; nothing is opened."""
        return resolve(self.resource_dir(), normalize_virtual_path(path))

    def resolve_plugin(self, path: PathLike) -> Path:
        """Absolute path of a plugin file; nothing is opened."""
        return resolve(self.plugins_dir(), normalize_virtual_path(path))

    def open(self, path: PathLike, mode: str = "rb") -> VirtualFile:
        """Open a handle on a file in the resource directory."""
        target = self.resolve_resource(path)
        logger.debug(f"Opening {target} ({mode})", extra=self._log_extra)
        return self.vfs.open_with(target, mode)

    def open_tmp(self, path: PathLike, mode: str = "w+b") -> VirtualFile:
        """Open a staging handle under the service's .tmp directory, for ``save_to``."""
        target = resolve(self.tmp_dir(), normalize_virtual_path(path))
        logger.debug(f"Opening staging file {target} ({mode})", extra=self._log_extra)
        return self.vfs.open_with(target, mode)

    # ========== Relocation ==========

    def _relative_to_tenant(self, path: Path) -> PurePosixPath:
        resource_dir = self.resource_dir()
        tmp_dir = self.tmp_dir()
        if path.is_relative_to(resource_dir):
            relative = PurePosixPath(path.relative_to(resource_dir).as_posix())
            if relative.parts and relative.parts[0] == TMP_SUBDIR:
                relative = PurePosixPath(*relative.parts[1:])
        elif path.is_relative_to(tmp_dir):
            relative = PurePosixPath(path.relative_to(tmp_dir).as_posix())
        else:
            raise PathArithmeticError(
                f"{path} is outside the resource and staging directories of service {self.service_id}",
                path=path,
            )
        if not relative.parts:
            raise PathArithmeticError(f"{path} names a directory, not a file", path=path)
        return relative

    def save_to(self, handle: VirtualFile, new_name: Optional[str] = None) -> str:
        """
        Move a handle's resource into the resource directory.

        The handle usually lives under ``<id>/.tmp`` (or ``<id>/files/.tmp``);
        its path below that staging directory is kept, optionally with the
        final file name replaced by ``new_name``. Afterwards the handle refers to
        the new path, so further writes land in the saved file.

        Args:
            handle: Open or closed handle whose resource should be kept
            new_name: Optional replacement for the final file name

        Returns:
            The resulting file name

        Raises:
            PathArithmeticError: If the handle lies outside this tenant's tree
            PathEncodingError: If new_name is not a bare file name
        """
        source = handle.path
        relative = self._relative_to_tenant(source)
        if new_name is not None:
            name = normalize_virtual_path(new_name)
            if not name or "/" in name or "\\" in name:
                raise PathEncodingError(f"New name must be a bare file name - {new_name!r}", path=new_name)
            try:
                relative = relative.with_name(name)
            except ValueError as error:
                raise PathEncodingError(f"Invalid file name - {new_name!r}", path=new_name) from error

        target = resolve(self.resource_dir(), relative)
        if not handle.closed:
            handle.flush()
        self.vfs.ensure_dir(target.parent)
        self.vfs.rename(source, target)
        handle._relocate(target)
        logger.info(f"Saved {source} as {target}", extra=self._log_extra)
        return target.name

    def discard(self, handle: VirtualFile) -> None:
        """
        Close a handle and delete its backing resource.

        Raises:
            PathArithmeticError: If the handle lies outside this tenant's service directory
        """
        source = handle.path
        if not source.is_relative_to(self.vfs.service_dir(self.service_id)):
            raise PathArithmeticError(
                f"{source} is outside the directory of service {self.service_id}",
                path=source,
            )
        handle.close()
        self.vfs.remove(source)
        logger.info(f"Discarded {source}", extra=self._log_extra)

    def to_dict(self) -> Dict[str, Any]:
        return {"root": str(self.vfs.root), **self._context.model_dump()}

    def __repr__(self) -> str:
        return (
            f"TenantBinding(service_id={self.service_id}, version={self.version!r}, "
            f"is_draft={self.is_draft}, vfs={self.vfs!r})"
        )
