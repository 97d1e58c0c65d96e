"""Shared fixtures for the rapidfs test suite."""

import shutil
from pathlib import Path

import pytest

from rapidfs.filesystem import DiskBackend, MemoryBackend

DATA_DIR = Path(__file__).parent / "data"

MEMORY_ROOT = "/private/path/to/services"


@pytest.fixture
def services_dir(tmp_path) -> Path:
    """A writable copy of tests/data/services."""
    target = tmp_path / "services"
    shutil.copytree(DATA_DIR / "services", target)
    return target


@pytest.fixture
def disk_vfs(services_dir) -> DiskBackend:
    return DiskBackend(services_dir)


@pytest.fixture
def memory_vfs() -> MemoryBackend:
    return MemoryBackend(
        MEMORY_ROOT,
        {
            f"{MEMORY_ROOT}/domains/music.apps.example.com": '{"service_id": 123, "version": "v1", "is_draft": false}',
            f"{MEMORY_ROOT}/123/versions/v1/schema.xml": "schema.xml",
            f"{MEMORY_ROOT}/123/versions/v1/pipeline_register.xml": "pipeline_register.xml",
            f"{MEMORY_ROOT}/123/versions/v1/endpoint_subscription.xml": "endpoint_subscription.xml",
            f"{MEMORY_ROOT}/123/versions/v1/ecma/file1.js": "export default () => 1",
            f"{MEMORY_ROOT}/123/versions/v1/ecma/lib/util.js": "export const x = 2",
            f"{MEMORY_ROOT}/123/files/file1.txt": "file1 content\n",
        },
    )


@pytest.fixture(params=["disk", "memory"])
def any_vfs(request, disk_vfs, memory_vfs):
    """Runs a test once per backend."""
    return disk_vfs if request.param == "disk" else memory_vfs
