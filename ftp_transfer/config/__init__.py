"""Configuration module for the FTP transfer helpers.

This module handles settings and credentials:
- SettingsManager: JSON settings file, repaired on load and validated on save
- CredentialManager: Secure credential storage via keyring
- Paths: Application data directories
- TransferSettings: Settings dataclass
"""
