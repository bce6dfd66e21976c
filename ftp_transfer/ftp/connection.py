"""FTP connection management for the FTP transfer helpers.

Provides ConnectionState enum, FTPConnectionConfig dataclass,
and FTPConnectionManager, which opens the ftplib session the
transfer helpers run against.
"""

import logging
import socket
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from ftplib import FTP, error_perm
from typing import Optional

from ftp_transfer.config.credentials import CredentialManager
from ftp_transfer.config.settings import (
    MAX_PORT,
    MAX_TIMEOUT,
    MIN_PORT,
    MIN_TIMEOUT,
    TransferSettings,
)
from ftp_transfer.ftp.exceptions import (
    FTPConnectionError,
    FTPAuthenticationError,
    FTPNotConnectedError,
    FTPTimeoutError,
)
from ftp_transfer.ftp.filesystem import FtplibFileSystem

logger = logging.getLogger("ftp_transfer.connection")


class ConnectionState(Enum):
    """FTP connection state."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass
class FTPConnectionConfig:
    """FTP connection configuration."""
    host: str
    port: int = 21
    username: str = "anonymous"
    passive_mode: bool = True
    timeout: int = 30

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.host:
            raise ValueError("Host is required")
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ValueError(f"Port must be between {MIN_PORT} and {MAX_PORT}, got {self.port}")
        if not MIN_TIMEOUT <= self.timeout <= MAX_TIMEOUT:
            raise ValueError(
                f"Timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT}, got {self.timeout}"
            )

    @classmethod
    def from_settings(cls, settings: TransferSettings) -> "FTPConnectionConfig":
        """Build a connection config from saved settings."""
        return cls(
            host=settings.host,
            port=settings.port,
            username=settings.username,
            passive_mode=settings.passive_mode,
            timeout=settings.timeout,
        )


class FTPConnectionManager:
    """Manages FTP connection lifecycle."""

    def __init__(self, credentials: Optional[CredentialManager] = None):
        """
        Initialize the connection manager.

        Args:
            credentials: Keyring lookup for passwords not passed to connect()
        """
        self._credentials = credentials or CredentialManager()
        self._ftp: Optional[FTP] = None
        self._config: Optional[FTPConnectionConfig] = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at: Optional[datetime] = None
        self._error_message: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """True if currently connected."""
        return self._state == ConnectionState.CONNECTED

    @property
    def config(self) -> Optional[FTPConnectionConfig]:
        """Current connection configuration."""
        return self._config

    @property
    def connected_at(self) -> Optional[datetime]:
        """Timestamp when connection was established."""
        return self._connected_at

    @property
    def error_message(self) -> Optional[str]:
        """Last error message if state is ERROR."""
        return self._error_message

    @property
    def ftp(self) -> FTP:
        """
        Get the underlying FTP object.

        Raises:
            FTPNotConnectedError: If not connected
        """
        if not self.is_connected or self._ftp is None:
            raise FTPNotConnectedError("FTP access")
        return self._ftp

    def filesystem(self) -> FtplibFileSystem:
        """
        Remote filesystem view of the current session.

        Raises:
            FTPNotConnectedError: If not connected
        """
        return FtplibFileSystem(self.ftp)

    def connect(self, config: FTPConnectionConfig, password: Optional[str] = None) -> None:
        """
        Establish FTP connection.

        Args:
            config: Connection configuration
            password: FTP password; looked up in the keyring when None

        Raises:
            FTPConnectionError: If connection fails
            FTPAuthenticationError: If login fails
            FTPTimeoutError: If connection times out
        """
        self._config = config
        self._state = ConnectionState.CONNECTING
        self._error_message = None

        if password is None:
            password = self._credentials.get_password(
                config.host, config.port, config.username
            ) or ""

        try:
            self._ftp = FTP()

            try:
                self._ftp.connect(
                    host=config.host,
                    port=config.port,
                    timeout=config.timeout
                )
            except socket.timeout:
                raise FTPTimeoutError("Connection", config.timeout)
            except (socket.error, OSError) as e:
                raise FTPConnectionError(config.host, config.port, e)

            try:
                self._ftp.login(user=config.username, passwd=password)
            except error_perm as e:
                raise FTPAuthenticationError(config.username, e)

            self._ftp.set_pasv(config.passive_mode)

            self._state = ConnectionState.CONNECTED
            self._connected_at = datetime.now()
            logger.info(f"Connected to {config.host}:{config.port} as {config.username}")

        except (FTPConnectionError, FTPAuthenticationError, FTPTimeoutError) as e:
            self._state = ConnectionState.ERROR
            self._error_message = str(e)
            self._close_quietly()
            logger.error(str(e))
            raise
        except Exception as e:
            self._state = ConnectionState.ERROR
            self._error_message = str(e)
            self._close_quietly()
            raise FTPConnectionError(config.host, config.port, e)

    def disconnect(self) -> None:
        """Close FTP connection gracefully."""
        if self._ftp:
            try:
                self._ftp.quit()
            except Exception:
                # Best effort close
                self._ftp.close()
            logger.info("FTP connection closed")

        self._ftp = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at = None

    def _close_quietly(self) -> None:
        """Drop a half-open session after a failed connect."""
        if self._ftp is not None:
            self._ftp.close()
        self._ftp = None

    def __enter__(self) -> "FTPConnectionManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
