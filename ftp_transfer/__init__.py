"""Buffered FTP transfers and recursive directory helpers.

Typical use:

    with FTPConnectionManager() as manager:
        manager.connect(FTPConnectionConfig(host="ftp.example.com"), password="secret")
        transfer = FTPTransfer(manager.filesystem())
        transfer.download_directory("/pub/data", "data")
"""

from ftp_transfer.config.settings import SettingsManager, TransferSettings
from ftp_transfer.ftp.connection import (
    ConnectionState,
    FTPConnectionConfig,
    FTPConnectionManager,
)
from ftp_transfer.ftp.exceptions import (
    FTPArgumentError,
    FTPAuthenticationError,
    FTPConnectionError,
    FTPError,
    FTPInvalidObjectTypeError,
    FTPNotConnectedError,
    FTPRemoteDirectoryNotFoundError,
    FTPTimeoutError,
    LocalDirectoryNotFoundError,
)
from ftp_transfer.ftp.filesystem import (
    FtplibFileSystem,
    ObjectType,
    RemoteFileSystem,
    RemoteItem,
)
from ftp_transfer.ftp.transfer import FTPTransfer

__version__ = "1.0.0"

__all__ = [
    "FTPTransfer",
    "FtplibFileSystem",
    "RemoteFileSystem",
    "RemoteItem",
    "ObjectType",
    "ConnectionState",
    "FTPConnectionConfig",
    "FTPConnectionManager",
    "SettingsManager",
    "TransferSettings",
    "FTPError",
    "FTPArgumentError",
    "FTPAuthenticationError",
    "FTPConnectionError",
    "FTPInvalidObjectTypeError",
    "FTPNotConnectedError",
    "FTPRemoteDirectoryNotFoundError",
    "FTPTimeoutError",
    "LocalDirectoryNotFoundError",
]
