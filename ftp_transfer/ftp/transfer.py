"""Transfer helpers for FTP file and directory operations.

Buffered file download and upload, recursive directory download and
upload, and deletion of a directory's contents, built on top of a
RemoteFileSystem.
"""

import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple, Union

from ftp_transfer.config.settings import TransferSettings
from ftp_transfer.ftp.exceptions import (
    FTPArgumentError,
    FTPInvalidObjectTypeError,
    FTPRemoteDirectoryNotFoundError,
    LocalDirectoryNotFoundError,
)
from ftp_transfer.ftp.filesystem import (
    ObjectType,
    RemoteFileSystem,
    RemoteItem,
    join_remote_path,
)

logger = logging.getLogger("ftp_transfer.transfer")

PathLike = Union[str, Path]


class FTPTransfer:
    """Buffered transfers and directory walks over a remote filesystem."""

    # Transfer buffer size (2KB)
    BUFFER_SIZE = 2048
    # Download cache size (2MB)
    MAX_CACHE_SIZE = 2097152

    def __init__(
        self,
        filesystem: RemoteFileSystem,
        buffer_size: Optional[int] = None,
        max_cache_size: Optional[int] = None
    ):
        """
        Initialize the transfer helper.

        Args:
            filesystem: Remote filesystem to transfer against
            buffer_size: Bytes per read, defaults to BUFFER_SIZE
            max_cache_size: Download cache capacity, defaults to MAX_CACHE_SIZE
        """
        self._fs = filesystem
        self._buffer_size = buffer_size or self.BUFFER_SIZE
        self._max_cache_size = max_cache_size or self.MAX_CACHE_SIZE
        if self._buffer_size > self._max_cache_size:
            raise ValueError(
                f"Buffer size {self._buffer_size} exceeds cache size {self._max_cache_size}"
            )

    @classmethod
    def from_settings(
        cls,
        filesystem: RemoteFileSystem,
        settings: TransferSettings
    ) -> "FTPTransfer":
        """Create a helper using the buffer and cache sizes from settings."""
        return cls(
            filesystem,
            buffer_size=settings.buffer_size,
            max_cache_size=settings.max_cache_size
        )

    @property
    def filesystem(self) -> RemoteFileSystem:
        """Remote filesystem used for transfers."""
        return self._fs

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @property
    def max_cache_size(self) -> int:
        return self._max_cache_size

    # ----------------------
    # Buffered copy
    # ----------------------
    def _copy_stream(self, source: BinaryIO, destination: BinaryIO) -> int:
        """
        Copy a stream in buffer-sized chunks until end of stream.

        Args:
            source: Stream to read from
            destination: Stream to write each chunk to

        Returns:
            Number of bytes copied
        """
        buffer = bytearray(self._buffer_size)
        view = memoryview(buffer)
        total = 0

        while True:
            bytes_size = source.readinto(buffer)
            if not bytes_size:
                break
            destination.write(view[:bytes_size])
            total += bytes_size

        return total

    # ----------------------
    # File download
    # ----------------------
    def download(self, item: RemoteItem, local_path: PathLike) -> int:
        """
        Download a remote file through the in-memory cache.

        The local file is truncated first, then filled by appending the
        cache each time the next chunk would overflow it and once more
        at end of stream.

        Args:
            item: Remote file to download
            local_path: Local destination file

        Returns:
            Number of bytes downloaded

        Raises:
            FTPInvalidObjectTypeError: If item is not a file
        """
        if item.type != ObjectType.FILE:
            raise FTPInvalidObjectTypeError(item.path, item.type.value)

        local_path = Path(local_path)
        cache = bytearray(self._max_cache_size)
        cache_view = memoryview(cache)
        buffer = bytearray(self._buffer_size)
        buffer_view = memoryview(buffer)
        cached_size = 0
        total = 0

        with self._fs.open_read_stream(item.path) as stream:
            local_path.open("wb").close()

            while True:
                bytes_size = stream.readinto(buffer) or 0

                if bytes_size == 0 or cached_size + bytes_size > self._max_cache_size:
                    self._write_cache_to_file(cache_view, local_path, cached_size)
                    if bytes_size == 0:
                        break
                    cached_size = 0

                cache_view[cached_size:cached_size + bytes_size] = buffer_view[:bytes_size]
                cached_size += bytes_size
                total += bytes_size

        logger.info(f"Downloaded {item.path} -> {local_path} ({total} bytes)")
        return total

    def _write_cache_to_file(self, cache: memoryview, local_path: Path, cached_size: int) -> None:
        """Append the first cached_size bytes of the cache to a local file."""
        if cached_size == 0:
            return
        with open(local_path, "ab") as f:
            f.write(cache[:cached_size])

    # ----------------------
    # File upload
    # ----------------------
    def upload(self, remote_dir: str, *files: PathLike) -> List[str]:
        """
        Upload local files into an existing remote directory.

        Args:
            remote_dir: Remote destination directory
            *files: Local files (str or Path)

        Returns:
            Remote paths written, in argument order

        Raises:
            FTPArgumentError: If no files are given or a file is None
            FTPRemoteDirectoryNotFoundError: If remote_dir does not exist
        """
        if not files:
            raise FTPArgumentError("files")
        if any(f is None for f in files):
            raise FTPArgumentError("files", "must not contain None")
        if not self._fs.directory_exists(remote_dir):
            raise FTPRemoteDirectoryNotFoundError(remote_dir)

        uploaded = []
        for local_file in files:
            local_file = Path(local_file)
            remote_path = join_remote_path(remote_dir, local_file.name)
            self._upload_file(remote_path, local_file)
            uploaded.append(remote_path)
        return uploaded

    def _upload_file(self, remote_path: str, local_file: Optional[Path]) -> int:
        """
        Upload one local file to a remote path, chunk by chunk.

        Returns:
            Number of bytes uploaded
        """
        if local_file is None:
            raise FTPArgumentError("local_file")

        with open(local_file, "rb") as local_stream:
            with self._fs.open_write_stream(remote_path) as remote_stream:
                total = self._copy_stream(local_stream, remote_stream)

        logger.info(f"Uploaded {local_file} -> {remote_path} ({total} bytes)")
        return total

    # ----------------------
    # Directory download
    # ----------------------
    def download_directory(self, remote_dir: str, local_path: PathLike) -> None:
        """
        Mirror a remote directory tree into a local directory.

        Files are downloaded, directories are descended into, links and
        unknown objects are skipped. Children are visited in listing
        order, depth first.

        A relative remote_dir is resolved against the working directory
        at the time of the call. The working directory is restored when
        the walk ends.

        Args:
            remote_dir: Remote source directory
            local_path: Local destination directory (created if needed)
        """
        pending: List[Tuple[RemoteItem, Path]] = [
            (RemoteItem(remote_dir, ObjectType.DIRECTORY), Path(local_path))
        ]
        start_dir = self._fs.get_working_directory()

        try:
            while pending:
                item, local = pending.pop()

                if item.type == ObjectType.FILE:
                    self.download(item, local)
                    continue

                local.mkdir(parents=True, exist_ok=True)
                self._fs.set_working_directory(item.path)
                # PWD is absolute, so every child listed from it is too
                current = self._fs.get_working_directory()
                logger.debug(f"Current remote directory is {current}")

                children = []
                for child in self._fs.list(current):
                    if child.type in (ObjectType.FILE, ObjectType.DIRECTORY):
                        children.append((child, local / child.name))
                    else:
                        logger.info(f"Skipping {child.type.value} {child.path}")
                pending.extend(reversed(children))
        finally:
            self._fs.set_working_directory(start_dir)

    # ----------------------
    # Directory upload
    # ----------------------
    def upload_directory(
        self,
        remote_dir: str,
        local_dir: Optional[PathLike],
        create_folder_on_server: bool
    ) -> None:
        """
        Mirror a local directory tree into an existing remote directory.

        Args:
            remote_dir: Remote destination directory
            local_dir: Local source directory (str or Path)
            create_folder_on_server: If True, upload into a new remote folder
                named after local_dir; otherwise upload its contents directly

        Raises:
            FTPArgumentError: If local_dir is None
            LocalDirectoryNotFoundError: If local_dir is not a directory
            FTPRemoteDirectoryNotFoundError: If remote_dir does not exist
        """
        if local_dir is None:
            raise FTPArgumentError("local_dir")
        # "." and ".." have no name of their own until resolved
        local_dir = Path(local_dir).resolve()
        if not local_dir.is_dir():
            raise LocalDirectoryNotFoundError(str(local_dir))
        if not self._fs.directory_exists(remote_dir):
            raise FTPRemoteDirectoryNotFoundError(remote_dir)

        if create_folder_on_server:
            items = [local_dir]
        else:
            items = self._list_local(local_dir)

        pending: List[Tuple[str, Path]] = [(remote_dir, p) for p in reversed(items)]

        while pending:
            remote_parent, local = pending.pop()
            remote_path = join_remote_path(remote_parent, local.name)

            if local.is_file():
                self._upload_file(remote_path, local)
            elif local.is_dir():
                if not self._fs.directory_exists(remote_path):
                    self._fs.create_directory(remote_path)
                    logger.debug(f"Created remote directory {remote_path}")
                pending.extend((remote_path, p) for p in reversed(self._list_local(local)))
            else:
                logger.info(f"Skipping unsupported local object {local}")

    @staticmethod
    def _list_local(directory: Path) -> List[Path]:
        """Children of a local directory, sorted by name."""
        return sorted(directory.iterdir(), key=lambda p: p.name)

    # ----------------------
    # Delete
    # ----------------------
    def delete_sub_directory(self, parent_dir: str) -> None:
        """
        Delete everything inside a remote directory, keeping the directory.

        Files are deleted directly; subdirectories are removed with the
        filesystem's recursive delete.

        Args:
            parent_dir: Remote directory to empty

        Raises:
            FTPArgumentError: If parent_dir is empty
            FTPRemoteDirectoryNotFoundError: If parent_dir does not exist
        """
        if not parent_dir:
            raise FTPArgumentError("parent_dir")
        if not self._fs.directory_exists(parent_dir):
            raise FTPRemoteDirectoryNotFoundError(parent_dir)

        for item in self._fs.list(parent_dir):
            if item.type == ObjectType.FILE:
                self._fs.delete_file(item.path)
                logger.debug(f"Deleted file {item.path}")
            elif item.type == ObjectType.DIRECTORY:
                self._fs.delete_directory(item.path, recursive=True)
                logger.debug(f"Deleted directory {item.path}")
            else:
                logger.info(f"Don't know how to delete object type {item.type.value}: {item.path}")
