"""Local FTP server for integration testing.

Uses pyftpdlib to serve a temporary directory on a free port.
"""

import tempfile
import threading
from pathlib import Path
from typing import Optional

from pyftpdlib.authorizers import DummyAuthorizer
from pyftpdlib.handlers import FTPHandler
from pyftpdlib.servers import FTPServer


class MockFTPServer:
    """
    FTP server backed by a temporary directory.

    Usage:
        with MockFTPServer() as server:
            # Connect to server.host:server.port
            # server.root_dir is the served filesystem
            pass
    """

    DEFAULT_USER = "testuser"
    DEFAULT_PASS = "testpass"

    def __init__(
        self,
        port: int = 0,
        username: str = DEFAULT_USER,
        password: str = DEFAULT_PASS,
    ):
        """
        Initialize the server.

        Args:
            port: Port to listen on, 0 picks a free one
            username: FTP username
            password: FTP password
        """
        self._requested_port = port
        self.username = username
        self.password = password

        self._server: Optional[FTPServer] = None
        self._thread: Optional[threading.Thread] = None
        self._temp_dir: Optional[tempfile.TemporaryDirectory] = None
        self._root_dir: Optional[Path] = None

    @property
    def root_dir(self) -> Path:
        """Root directory of the served filesystem."""
        if self._root_dir is None:
            raise RuntimeError("Server not started")
        return self._root_dir

    @property
    def host(self) -> str:
        """Server host address."""
        return "127.0.0.1"

    @property
    def port(self) -> int:
        """Port the server is bound to."""
        if self._server is None:
            raise RuntimeError("Server not started")
        return self._server.address[1]

    def start(self) -> None:
        """Start the FTP server in a background thread."""
        self._temp_dir = tempfile.TemporaryDirectory(prefix="mock_ftp_")
        self._root_dir = Path(self._temp_dir.name)

        authorizer = DummyAuthorizer()
        authorizer.add_user(
            self.username,
            self.password,
            str(self._root_dir),
            perm="elradfmw"  # Full permissions
        )

        handler = type("MockFTPHandler", (FTPHandler,), {})
        handler.authorizer = authorizer

        self._server = FTPServer((self.host, self._requested_port), handler)
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"timeout": 0.1},
            daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the FTP server and clean up."""
        if self._server:
            self._server.close_all()
        if self._thread:
            self._thread.join(timeout=5)
        if self._temp_dir:
            self._temp_dir.cleanup()

        self._server = None
        self._thread = None
        self._temp_dir = None
        self._root_dir = None

    def __enter__(self) -> "MockFTPServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

