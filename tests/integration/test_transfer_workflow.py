"""Integration tests for the transfer workflow.

Connects to a local pyftpdlib server and runs every transfer helper
over a real ftplib session.
"""

import pytest

from ftp_transfer.ftp.connection import FTPConnectionConfig, FTPConnectionManager, ConnectionState
from ftp_transfer.ftp.exceptions import (
    FTPAuthenticationError,
    FTPInvalidObjectTypeError,
    FTPRemoteDirectoryNotFoundError,
)
from ftp_transfer.ftp.filesystem import ObjectType, RemoteItem
from ftp_transfer.ftp.transfer import FTPTransfer
from tests.fakes import local_snapshot, pattern_bytes

from .mock_ftp_server import MockFTPServer


@pytest.fixture
def ftp_server():
    """Provide a running FTP server."""
    server = MockFTPServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def connection(ftp_server):
    """Provide a connection manager logged in to the test server."""
    manager = FTPConnectionManager()
    config = FTPConnectionConfig(
        host=ftp_server.host,
        port=ftp_server.port,
        username=ftp_server.username,
    )
    manager.connect(config, password=ftp_server.password)
    yield manager
    manager.disconnect()


@pytest.fixture
def transfer(connection):
    return FTPTransfer(connection.filesystem())


@pytest.fixture
def served_tree(ftp_server):
    """Populate the server with a small tree under /pub."""
    root = ftp_server.root_dir
    (root / "pub" / "data" / "nested").mkdir(parents=True)
    (root / "pub" / "empty").mkdir()
    (root / "pub" / "readme.txt").write_bytes(b"read me\n")
    (root / "pub" / "data" / "big.bin").write_bytes(pattern_bytes(3 * 1024 * 1024 + 5))
    (root / "pub" / "data" / "nested" / "small.bin").write_bytes(b"\x00\xff" * 10)
    return root / "pub"


class TestConnection:
    """Integration tests for connecting."""

    def test_connect_and_disconnect(self, ftp_server):
        manager = FTPConnectionManager()
        manager.connect(
            FTPConnectionConfig(host=ftp_server.host, port=ftp_server.port, username=ftp_server.username),
            password=ftp_server.password,
        )
        assert manager.state == ConnectionState.CONNECTED

        manager.disconnect()
        assert manager.state == ConnectionState.DISCONNECTED

    def test_wrong_password(self, ftp_server):
        manager = FTPConnectionManager()

        with pytest.raises(FTPAuthenticationError):
            manager.connect(
                FTPConnectionConfig(host=ftp_server.host, port=ftp_server.port, username=ftp_server.username),
                password="wrongpassword",
            )

        assert manager.state == ConnectionState.ERROR


class TestFilesystem:
    """Integration tests for the ftplib adapter."""

    def test_list_reports_types(self, connection, served_tree):
        items = connection.filesystem().list("/pub")

        assert sorted((i.name, i.type) for i in items) == [
            ("data", ObjectType.DIRECTORY),
            ("empty", ObjectType.DIRECTORY),
            ("readme.txt", ObjectType.FILE),
        ]

    def test_directory_exists(self, connection, served_tree):
        fs = connection.filesystem()

        assert fs.directory_exists("/pub/data") is True
        assert fs.directory_exists("/pub/missing") is False
        assert fs.get_working_directory() == "/"

    def test_recursive_directory_delete(self, connection, served_tree):
        connection.filesystem().delete_directory("/pub/data", recursive=True)

        assert not (served_tree / "data").exists()


class TestTransferWorkflow:
    """Integration tests for FTPTransfer over a real server."""

    def test_download_file(self, transfer, served_tree, tmp_path):
        local = tmp_path / "big.bin"

        size = transfer.download(RemoteItem("/pub/data/big.bin", ObjectType.FILE), local)

        assert local.read_bytes() == (served_tree / "data" / "big.bin").read_bytes()
        assert size == 3 * 1024 * 1024 + 5

    def test_download_directory_rejected_as_file(self, transfer, served_tree, tmp_path):
        with pytest.raises(FTPInvalidObjectTypeError):
            transfer.download(RemoteItem("/pub/data", ObjectType.DIRECTORY), tmp_path / "x")

    def test_download_directory(self, transfer, served_tree, tmp_path):
        local = tmp_path / "mirror"

        transfer.download_directory("/pub", local)

        expected_files, expected_dirs = local_snapshot(served_tree)
        files, dirs = local_snapshot(local)
        assert files == expected_files
        assert dirs == expected_dirs

    def test_download_relative_directory(self, transfer, connection, served_tree, tmp_path):
        """Test a relative source resolves against the session's working directory."""
        local = tmp_path / "mirror"

        transfer.download_directory("pub", local)

        assert local_snapshot(local) == local_snapshot(served_tree)
        assert connection.ftp.pwd() == "/"

    def test_download_relative_directory_from_subdirectory(
        self, transfer, connection, served_tree, tmp_path
    ):
        connection.ftp.cwd("/pub")
        local = tmp_path / "data"

        transfer.download_directory("data", local)

        assert local_snapshot(local) == local_snapshot(served_tree / "data")
        assert connection.ftp.pwd() == "/pub"

    def test_session_usable_after_transfers(self, transfer, connection, served_tree, tmp_path):
        """Test every data transfer leaves the control connection in sync."""
        for _ in range(3):
            transfer.download(RemoteItem("/pub/readme.txt", ObjectType.FILE), tmp_path / "r.txt")

        assert connection.ftp.pwd() == "/"

    @pytest.mark.parametrize("remote_file", ["/pub/readme.txt", "/pub/data/big.bin"])
    def test_session_usable_after_failed_download(
        self, transfer, connection, served_tree, tmp_path, remote_file
    ):
        """Test a local failure mid-transfer leaves the control connection in sync."""
        item = RemoteItem(remote_file, ObjectType.FILE)

        with pytest.raises(FileNotFoundError):
            transfer.download(item, tmp_path / "no-such-dir" / "out.bin")

        assert connection.filesystem().directory_exists("/pub") is True
        transfer.download(item, tmp_path / "out.bin")
        assert (tmp_path / "out.bin").read_bytes() == (served_tree / remote_file[len("/pub/"):]).read_bytes()

    def test_upload_files(self, transfer, ftp_server, tmp_path):
        (ftp_server.root_dir / "incoming").mkdir()
        first = tmp_path / "one.bin"
        second = tmp_path / "two.txt"
        first.write_bytes(pattern_bytes(70000))
        second.write_text("second file")

        transfer.upload("/incoming", first, second)

        assert (ftp_server.root_dir / "incoming" / "one.bin").read_bytes() == pattern_bytes(70000)
        assert (ftp_server.root_dir / "incoming" / "two.txt").read_text() == "second file"

    def test_upload_missing_remote_directory(self, transfer, tmp_path):
        local = tmp_path / "f.txt"
        local.write_text("x")

        with pytest.raises(FTPRemoteDirectoryNotFoundError):
            transfer.upload("/does/not/exist", local)

    @pytest.mark.parametrize("create_folder, prefix", [(True, "site/"), (False, "")])
    def test_upload_directory(self, transfer, ftp_server, local_site, create_folder, prefix):
        (ftp_server.root_dir / "www").mkdir()

        transfer.upload_directory("/www", local_site, create_folder)

        files, dirs = local_snapshot(ftp_server.root_dir / "www")
        expected_files, expected_dirs = local_snapshot(local_site)
        assert files == {prefix + k: v for k, v in expected_files.items()}
        expected = [prefix + d for d in expected_dirs]
        if create_folder:
            expected.append("site")
        assert dirs == sorted(expected)

    def test_upload_current_directory_creates_named_folder(
        self, transfer, ftp_server, local_site, monkeypatch
    ):
        """Test "." as the source still uploads into a folder named after it."""
        (ftp_server.root_dir / "www").mkdir()
        monkeypatch.chdir(local_site)

        transfer.upload_directory("/www", ".", True)

        assert [p.name for p in (ftp_server.root_dir / "www").iterdir()] == ["site"]
        files, _ = local_snapshot(ftp_server.root_dir / "www" / "site")
        assert files == local_snapshot(local_site)[0]

    def test_delete_sub_directory(self, transfer, served_tree):
        transfer.delete_sub_directory("/pub")

        assert served_tree.is_dir()
        assert list(served_tree.iterdir()) == []

    def test_round_trip_through_server(self, transfer, ftp_server, local_site, tmp_path):
        """Test uploading a tree and downloading it back yields the same tree."""
        (ftp_server.root_dir / "backup").mkdir()
        transfer.upload_directory("/backup", local_site, True)

        restored = tmp_path / "restored"
        transfer.download_directory("/backup/site", restored)

        assert local_snapshot(restored) == local_snapshot(local_site)
