"""Remote filesystem abstraction for the FTP transfer helpers.

Provides the ObjectType enum, the RemoteItem descriptor, the
RemoteFileSystem protocol describing what the transfer helpers need
from an FTP client, and FtplibFileSystem, its implementation on top
of an ftplib.FTP session.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from ftplib import FTP, all_errors, error_perm
from typing import BinaryIO, ContextManager, Iterator, List, Optional, Protocol

logger = logging.getLogger("ftp_transfer.filesystem")


class ObjectType(Enum):
    """Kind of object found on the remote server."""
    FILE = "file"
    DIRECTORY = "directory"
    LINK = "link"
    UNKNOWN = "unknown"


def join_remote_path(parent: str, name: str) -> str:
    """
    Join a remote directory and a child name with a forward slash.

    Args:
        parent: Remote directory path
        name: Child name

    Returns:
        Joined remote path
    """
    return f"{parent.rstrip('/')}/{name}"


@dataclass(frozen=True)
class RemoteItem:
    """A file, directory or link reported by a remote listing."""
    path: str
    type: ObjectType

    @property
    def name(self) -> str:
        """Last segment of the remote path."""
        return self.path.rstrip("/").split("/")[-1]

    @property
    def is_file(self) -> bool:
        return self.type == ObjectType.FILE

    @property
    def is_directory(self) -> bool:
        return self.type == ObjectType.DIRECTORY


class RemoteFileSystem(Protocol):
    """Capabilities the transfer helpers require from an FTP client."""

    def open_read_stream(self, path: str) -> ContextManager[BinaryIO]:
        ...

    def open_write_stream(self, path: str) -> ContextManager[BinaryIO]:
        ...

    def list(self, path: str) -> List[RemoteItem]:
        ...

    def directory_exists(self, path: str) -> bool:
        ...

    def create_directory(self, path: str) -> None:
        ...

    def delete_file(self, path: str) -> None:
        ...

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        ...

    def get_working_directory(self) -> str:
        ...

    def set_working_directory(self, path: str) -> None:
        ...


# MLSD "type" fact values
_MLSD_TYPES = {
    "file": ObjectType.FILE,
    "dir": ObjectType.DIRECTORY,
}
_MLSD_IGNORED = {"cdir", "pdir"}

# First character of a Unix-style LIST line
_LIST_TYPES = {
    "-": ObjectType.FILE,
    "d": ObjectType.DIRECTORY,
    "l": ObjectType.LINK,
}


def _mlsd_type(facts: dict) -> ObjectType:
    """Map MLSD facts to an ObjectType."""
    fact = facts.get("type", "").lower()
    if fact in _MLSD_TYPES:
        return _MLSD_TYPES[fact]
    # e.g. "OS.unix=slink:/target" or "os.unix=symlink"
    if fact.startswith("os.unix=sl") or fact.startswith("os.unix=symlink"):
        return ObjectType.LINK
    return ObjectType.UNKNOWN


def parse_list_line(line: str) -> Optional[tuple]:
    """
    Parse one Unix-style LIST line.

    Args:
        line: Raw line, e.g. "drwxr-xr-x  2 root root 4096 Jan  1 12:00 name"

    Returns:
        Tuple of (name, ObjectType), or None for lines that carry no entry
    """
    parts = line.split(None, 8)
    if len(parts) < 9:
        # "total 12" header and blank lines
        return None

    name = parts[8]
    object_type = _LIST_TYPES.get(parts[0][0], ObjectType.UNKNOWN)
    if object_type == ObjectType.LINK and " -> " in name:
        name = name.split(" -> ", 1)[0]
    if name in (".", ".."):
        return None
    return name, object_type


class FtplibFileSystem:
    """RemoteFileSystem backed by an ftplib.FTP session."""

    def __init__(self, ftp: FTP):
        """
        Initialize the filesystem adapter.

        Args:
            ftp: Connected and logged-in FTP session
        """
        self._ftp = ftp

    @property
    def ftp(self) -> FTP:
        """The underlying FTP session."""
        return self._ftp

    @contextmanager
    def open_read_stream(self, path: str) -> Iterator[BinaryIO]:
        """
        Open a binary stream reading a remote file.

        The transfer's final reply is always consumed, so the session
        stays usable when the caller fails mid-transfer.
        """
        with self._transfer(f"RETR {path}", "rb") as stream:
            yield stream

    @contextmanager
    def open_write_stream(self, path: str) -> Iterator[BinaryIO]:
        """Open a binary stream writing a remote file."""
        with self._transfer(f"STOR {path}", "wb") as stream:
            yield stream

    @contextmanager
    def _transfer(self, command: str, mode: str) -> Iterator[BinaryIO]:
        """Run a binary data transfer command and wrap its data connection."""
        self._ftp.voidcmd("TYPE I")
        conn = self._ftp.transfercmd(command)
        try:
            with conn, conn.makefile(mode) as stream:
                yield stream
        except Exception:
            self._discard_reply(command)
            raise
        self._ftp.voidresp()

    def _discard_reply(self, command: str) -> None:
        """Read the reply of an interrupted transfer, usually 426 or 226."""
        try:
            reply = self._ftp.getresp()
        except all_errors as e:
            logger.warning(f"No clean reply after interrupted {command.split()[0]}: {e}")
        else:
            logger.debug(f"Interrupted {command.split()[0]} ended with: {reply}")

    def list(self, path: str) -> List[RemoteItem]:
        """
        List the immediate children of a remote directory.

        Uses MLSD, falling back to LIST when the server rejects it.

        Args:
            path: Remote directory path

        Returns:
            RemoteItem for each child, in server order
        """
        try:
            entries = list(self._ftp.mlsd(path))
        except error_perm as e:
            logger.debug(f"MLSD not available for {path} ({e}), falling back to LIST")
            return self._list_fallback(path)

        items = []
        for name, facts in entries:
            if facts.get("type", "").lower() in _MLSD_IGNORED or name in (".", ".."):
                continue
            items.append(RemoteItem(join_remote_path(path, name), _mlsd_type(facts)))
        return items

    def _list_fallback(self, path: str) -> List[RemoteItem]:
        """List a directory with LIST and parse Unix-style output."""
        lines: List[str] = []
        self._ftp.dir(path, lines.append)

        items = []
        for line in lines:
            parsed = parse_list_line(line)
            if parsed is None:
                continue
            name, object_type = parsed
            items.append(RemoteItem(join_remote_path(path, name), object_type))
        return items

    def directory_exists(self, path: str) -> bool:
        """True if path can be entered as a directory."""
        current = self._ftp.pwd()
        try:
            self._ftp.cwd(path)
            return True
        except error_perm:
            return False
        finally:
            self._ftp.cwd(current)

    def create_directory(self, path: str) -> None:
        self._ftp.mkd(path)

    def delete_file(self, path: str) -> None:
        self._ftp.delete(path)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        """
        Remove a remote directory.

        Args:
            path: Remote directory path
            recursive: Remove all contents first, depth-first
        """
        if recursive:
            for item in self.list(path):
                if item.is_directory:
                    self.delete_directory(item.path, recursive=True)
                else:
                    self._ftp.delete(item.path)
        self._ftp.rmd(path)

    def get_working_directory(self) -> str:
        return self._ftp.pwd()

    def set_working_directory(self, path: str) -> None:
        self._ftp.cwd(path)
