"""
Configuration for the virtual filesystem.

This module defines the configuration class selecting the storage backend,
its root directory and directory auto-creation, plus the factories that turn
a configuration into a backend or a tenant binding.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .exceptions import VfsConfigurationError
from .filesystem.base import VirtualFileSystem
from .filesystem.disk import DiskBackend
from .filesystem.memory import MemoryBackend
from .tenant import TenantBinding

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("disk", "memory")

ENV_SERVICES_DIR = "RAPIDFS_SERVICES_DIR"
ENV_BACKEND = "RAPIDFS_BACKEND"
ENV_CREATE_DIRS = "RAPIDFS_CREATE_DIRS"
ENV_LOG_LEVEL = "RAPIDFS_LOG_LEVEL"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class VfsConfig:
    """
    Configuration for a virtual filesystem instance.

    All services share one root; a backend built from this config is meant to
    be created once per process and shared by every tenant binding.
    """

    # === Storage Settings ===

    services_dir: Path = field(default_factory=lambda: Path.cwd() / "services")
    """Directory holding 'domains/' and one subdirectory per service id."""

    backend: str = "disk"
    """Storage medium: 'disk' or 'memory'."""

    create_dirs: bool = True
    """Create a service's files/, plugins/ and .tmp/ directories on first use."""

    initial_files: Dict[str, bytes] = field(default_factory=dict)
    """
    Seed records for the memory backend, keyed by absolute path string.
    Ignored by the disk backend.
    """

    # === Logging ===

    log_level: int = logging.INFO
    """Level handed to init_vfs_logging by hosting processes."""

    def __post_init__(self):
        self.backend = str(self.backend).lower()
        if self.backend not in SUPPORTED_BACKENDS:
            raise VfsConfigurationError(
                f"Unknown backend '{self.backend}'. Supported: {', '.join(SUPPORTED_BACKENDS)}",
                config_field="backend",
                config_value=self.backend,
            )

        services_dir = Path(self.services_dir).expanduser()
        if self.backend == "disk":
            services_dir = services_dir.resolve()
        elif not services_dir.is_absolute():
            # resolving would consult the host cwd, which means nothing to a memory tree
            raise VfsConfigurationError(
                f"Memory backend root must be absolute, got '{services_dir}'",
                config_field="services_dir",
                config_value=services_dir,
            )
        self.services_dir = services_dir

    @classmethod
    def from_env(cls, **overrides) -> "VfsConfig":
        """
        Build a config from RAPIDFS_* environment variables.

        Keyword arguments override both the environment and the defaults.

        Raises:
            VfsConfigurationError: If an environment value is invalid
        """
        values = {}
        services_dir = os.getenv(ENV_SERVICES_DIR)
        if services_dir:
            values["services_dir"] = Path(services_dir)
        backend = os.getenv(ENV_BACKEND)
        if backend:
            values["backend"] = backend
        create_dirs = os.getenv(ENV_CREATE_DIRS)
        if create_dirs is not None:
            values["create_dirs"] = _parse_bool(ENV_CREATE_DIRS, create_dirs)
        log_level = os.getenv(ENV_LOG_LEVEL)
        if log_level:
            values["log_level"] = _parse_log_level(log_level)
        values.update(overrides)
        return cls(**values)


def _parse_bool(name: str, raw_value: str) -> bool:
    lowered = raw_value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise VfsConfigurationError(
        f"Invalid {name} value: expected a boolean, got '{raw_value}'",
        config_field=name,
        config_value=raw_value,
    )


def _parse_log_level(raw_value: str) -> int:
    value = raw_value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise VfsConfigurationError(
            f"Invalid {ENV_LOG_LEVEL} value: unknown level '{raw_value}'",
            config_field=ENV_LOG_LEVEL,
            config_value=raw_value,
        )
    return level


def create_vfs(config: Optional[VfsConfig] = None) -> VirtualFileSystem:
    """
    Build the backend described by ``config``.

    Args:
        config: Configuration (if None, read from the environment)

    Returns:
        A DiskBackend or MemoryBackend
    """
    if config is None:
        config = VfsConfig.from_env()

    if config.backend == "memory":
        vfs: VirtualFileSystem = MemoryBackend(
            config.services_dir,
            data=config.initial_files,
            create_dirs=config.create_dirs,
        )
    else:
        vfs = DiskBackend(config.services_dir, create_dirs=config.create_dirs)

    logger.info(f"Created {config.backend} filesystem rooted at {config.services_dir}")
    return vfs


def bind_domain(vfs: VirtualFileSystem, domain: str) -> TenantBinding:
    """Resolve ``domain`` to its service and return a binding scoped to it."""
    binding = TenantBinding.for_domain(vfs, domain)
    logger.info(
        f"Bound {domain} to service {binding.service_id} "
        f"({'draft' if binding.is_draft else 'version'} {binding.version})",
        extra={"service_id": binding.service_id},
    )
    return binding
