"""
Tests for rapidfs.filesystem.disk.

This module tests:
- Reads, open modes passed through to the OS, listing
- Wrapping of OS failures in VfsIOError
- Domain descriptor and schema helpers against the fixture tree
"""

from pathlib import Path

import pytest

from rapidfs.descriptor import TenantContext
from rapidfs.exceptions import (
    ContentEncodingError,
    DescriptorParseError,
    DomainNotFoundError,
    DotPathsNotSupportedError,
    SchemaFileNotFoundError,
    VfsIOError,
)
from rapidfs.filesystem import OsFileHandle


class TestDiskRead:
    """Tests for plain reads."""

    def test_read_resource(self, disk_vfs):
        stream = disk_vfs.read(disk_vfs.resolve("123/files/file1.txt"))
        try:
            assert stream.read() == b"file1 content\n"
        finally:
            stream.close()

    def test_read_missing_wraps_os_error(self, disk_vfs):
        """Test a missing file surfaces as VfsIOError carrying the OS error."""
        with pytest.raises(VfsIOError) as exc_info:
            disk_vfs.read(disk_vfs.resolve("123/files/missing.txt"))

        assert isinstance(exc_info.value.os_error, FileNotFoundError)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_read_rejects_dot_segments(self, disk_vfs, services_dir):
        with pytest.raises(DotPathsNotSupportedError):
            disk_vfs.read(services_dir / "123" / ".." / "123" / "files" / "file1.txt")

    def test_read_resource_file(self, disk_vfs):
        with disk_vfs.read_resource_file(123, "file1.txt") as stream:
            assert stream.read() == b"file1 content\n"


class TestDiskOpen:
    """Tests for open_with."""

    def test_missing_file_without_create_mode_fails(self, disk_vfs):
        """Test the OS decides: r+b on an absent file is an error."""
        with pytest.raises(VfsIOError):
            disk_vfs.open_with(disk_vfs.resolve("123/files/absent.bin"), "r+b")

    def test_write_then_read_round_trip(self, disk_vfs):
        path = disk_vfs.resolve("123/files/upload.bin")
        payload = bytes(range(256)) * 4

        with disk_vfs.open_with(path, "wb") as handle:
            assert isinstance(handle, OsFileHandle)
            handle.write(payload)

        assert disk_vfs.read_bytes(path) == payload

    def test_text_mode_rejected(self, disk_vfs):
        with pytest.raises(ValueError):
            disk_vfs.open_with(disk_vfs.resolve("123/files/file1.txt"), "r")


class TestDiskListing:
    """Tests for read_dir, rename and remove."""

    def test_read_dir_lists_immediate_children(self, disk_vfs, services_dir):
        entries = disk_vfs.read_dir(services_dir / "123" / "versions" / "v1" / "ecma")

        assert entries == [
            services_dir / "123" / "versions" / "v1" / "ecma" / "file1.js",
            services_dir / "123" / "versions" / "v1" / "ecma" / "lib",
        ]

    def test_read_dir_missing(self, disk_vfs, services_dir):
        with pytest.raises(VfsIOError):
            disk_vfs.read_dir(services_dir / "999")

    def test_rename_and_remove(self, disk_vfs, services_dir):
        src = services_dir / "123" / "files" / "file1.txt"
        dst = services_dir / "123" / "files" / "moved.txt"

        disk_vfs.rename(src, dst)
        assert not src.exists()
        assert dst.read_text() == "file1 content\n"

        disk_vfs.remove(dst)
        assert not dst.exists()
        with pytest.raises(VfsIOError):
            disk_vfs.remove(dst)


class TestDiskDescriptors:
    """Tests for domain descriptors and text helpers against the fixture tree."""

    def test_read_domain_descriptor(self, disk_vfs):
        context = disk_vfs.read_domain_descriptor("music.apps.example.com")

        assert context == TenantContext(service_id=123, version="v1", is_draft=False)

    def test_missing_domain(self, disk_vfs):
        with pytest.raises(DomainNotFoundError) as exc_info:
            disk_vfs.read_domain_descriptor("nobody.apps.example.com")

        assert exc_info.value.domain == "nobody.apps.example.com"

    def test_corrupt_domain_is_parse_error(self, disk_vfs):
        """Test a malformed record is distinguishable from a missing one."""
        with pytest.raises(DescriptorParseError):
            disk_vfs.read_domain_descriptor("broken.apps.example.com")

    def test_write_then_read_descriptor(self, disk_vfs):
        context = TenantContext(service_id=2 ** 62, version="2024-01", is_draft=True)

        path = disk_vfs.write_domain_descriptor("new.apps.example.com", context)

        assert path == disk_vfs.domain_file("new.apps.example.com")
        assert disk_vfs.read_domain_descriptor("new.apps.example.com") == context

    def test_read_schema_file(self, disk_vfs):
        text = disk_vfs.read_schema_file(123, False, "v1", "schema.xml")

        assert text.startswith('<?xml version="1.0"?>')
        assert "pipeline_register.xml" in text

    def test_read_draft_schema_file(self, disk_vfs):
        assert 'draft="true"' in disk_vfs.read_schema_file(123, True, "v2", "schema.xml")

    def test_missing_schema_file(self, disk_vfs):
        with pytest.raises(SchemaFileNotFoundError) as exc_info:
            disk_vfs.read_schema_file(123, False, "v1", "nothing.xml")

        assert exc_info.value.version == "v1"
        assert exc_info.value.is_draft is False

    def test_schema_file_must_be_utf8(self, disk_vfs, services_dir):
        (services_dir / "123" / "versions" / "v1" / "latin1.xml").write_bytes("caf\xe9".encode("latin-1"))

        with pytest.raises(ContentEncodingError):
            disk_vfs.read_schema_file(123, False, "v1", "latin1.xml")

    def test_dir_stream_rejects_dot_base(self, disk_vfs, services_dir):
        with pytest.raises(DotPathsNotSupportedError):
            disk_vfs.dir_stream(services_dir / "123" / ".." / "123")

    def test_backend_repr(self, disk_vfs, services_dir):
        assert repr(disk_vfs) == f"DiskBackend(root={str(services_dir)!r})"

    def test_root(self, disk_vfs, services_dir):
        assert disk_vfs.root == Path(services_dir)
