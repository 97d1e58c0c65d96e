"""
Logging helpers for processes serving files through rapidfs.

Records logged by a TenantBinding carry the tenant's ``service_id`` via
``extra``; backend records do not. ``init_vfs_logging`` attaches one handler to
the ``rapidfs`` package logger whose format shows the service id on every line,
leaving the host application's root logger alone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .config import VfsConfig

PACKAGE_LOGGER = "rapidfs"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] [svc:%(service_id)s] %(message)s"

_installed_handler: Optional[logging.Handler] = None


class VfsLogFilter(logging.Filter):
    """Gives records logged outside a tenant binding a '-' service id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "service_id", None) is None:
            record.service_id = "-"
        return True


def init_vfs_logging(
    config: Optional["VfsConfig"] = None,
    level: Optional[int] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Route rapidfs log records to a single service-aware handler.

    Calling this again replaces the handler installed by the previous call;
    handlers added by the application are kept.

    Args:
        config: Source of the log level (``config.log_level``)
        level: Explicit level, overriding the config
        handler: Destination handler (defaults to a stderr StreamHandler)

    Returns:
        The ``rapidfs`` package logger
    """
    global _installed_handler

    if level is None:
        level = config.log_level if config is not None else logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _installed_handler is not None:
        package_logger.removeHandler(_installed_handler)
        _installed_handler.close()

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(VfsLogFilter())
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    _installed_handler = handler

    package_logger.debug(f"Logging to {handler!r} at {logging.getLevelName(level)}")
    return package_logger
