"""Pytest configuration and shared fixtures for FTP transfer tests."""

import pytest
from pathlib import Path

from ftp_transfer.ftp.filesystem import ObjectType
from tests.fakes import InMemoryFileSystem


@pytest.fixture
def remote_fs() -> InMemoryFileSystem:
    """Provide an empty in-memory remote filesystem."""
    return InMemoryFileSystem()


@pytest.fixture
def remote_tree(remote_fs: InMemoryFileSystem) -> InMemoryFileSystem:
    """
    Remote tree used by directory tests:

        /pub/readme.txt
        /pub/data/a.bin
        /pub/data/nested/b.bin
        /pub/empty/
        /pub/latest            (symbolic link)
    """
    remote_fs.add_file("/pub/readme.txt", b"read me first\n")
    remote_fs.add_file("/pub/data/a.bin", b"\x00\x01\x02" * 1000)
    remote_fs.add_file("/pub/data/nested/b.bin", b"nested payload")
    remote_fs.add_directory("/pub/empty")
    remote_fs.add_object("/pub/latest", ObjectType.LINK)
    return remote_fs


@pytest.fixture
def local_site(tmp_path: Path) -> Path:
    """
    Local tree used by upload tests:

        site/index.html
        site/css/style.css
        site/css/fonts/mono.woff
        site/empty/
    """
    root = tmp_path / "site"
    (root / "css" / "fonts").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "index.html").write_bytes(b"<html><body>hi</body></html>")
    (root / "css" / "style.css").write_bytes(b"body { color: black; }")
    (root / "css" / "fonts" / "mono.woff").write_bytes(bytes(range(256)) * 20)
    return root
