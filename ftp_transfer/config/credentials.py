"""Secure credential storage for the FTP transfer helpers.

FTP passwords live in the system keyring (Windows Credential Manager,
macOS Keychain, Linux Secret Service), one entry per server account.
"""

from typing import Optional

import keyring
from keyring.errors import KeyringError


class CredentialManager:
    """Stores FTP account passwords in the system keyring."""

    SERVICE_NAME = "ftp-transfer"

    def __init__(self, service_name: Optional[str] = None):
        self._service_name = service_name or self.SERVICE_NAME

    @property
    def service_name(self) -> str:
        """Keyring service the passwords are filed under."""
        return self._service_name

    @staticmethod
    def account_key(host: str, port: int, username: str) -> str:
        """Keyring account name for an FTP login, e.g. 'user@host:21'."""
        return f"{username}@{host}:{port}"

    def save_password(self, host: str, port: int, username: str, password: str) -> bool:
        """
        Store the password for an FTP account.

        Returns:
            True if stored, False if the keyring backend refused
        """
        try:
            keyring.set_password(
                self._service_name, self.account_key(host, port, username), password
            )
            return True
        except KeyringError:
            return False

    def get_password(self, host: str, port: int, username: str) -> Optional[str]:
        """
        Look up the password for an FTP account.

        Returns:
            Password string, or None if missing or the keyring is unavailable
        """
        try:
            return keyring.get_password(
                self._service_name, self.account_key(host, port, username)
            )
        except KeyringError:
            return None

    def delete_password(self, host: str, port: int, username: str) -> bool:
        """Forget a stored password. Returns False if nothing was removed."""
        try:
            keyring.delete_password(
                self._service_name, self.account_key(host, port, username)
            )
            return True
        except KeyringError:
            return False
