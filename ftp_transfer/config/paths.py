"""Where ftp-transfer keeps its files.

Settings and logs live under one application directory. FTP_TRANSFER_HOME
overrides it; otherwise the platform's per-user config location is used.
Nothing is created here, writers create parents on first write.
"""

import os
import sys
from pathlib import Path


APP_NAME = "ftp-transfer"
HOME_ENV_VAR = "FTP_TRANSFER_HOME"

SETTINGS_FILE_NAME = "settings.json"
LOG_FILE_NAME = "transfer.log"


def _user_config_root() -> Path:
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def get_app_data_dir() -> Path:
    """
    Directory holding settings and logs.

    Returns:
        $FTP_TRANSFER_HOME when set, else e.g. ~/.config/ftp-transfer,
        %APPDATA%/ftp-transfer or ~/Library/Application Support/ftp-transfer
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _user_config_root() / APP_NAME


def get_settings_path() -> Path:
    return get_app_data_dir() / SETTINGS_FILE_NAME


def get_log_file_path() -> Path:
    """Default log file used by setup_logging(log_file=True)."""
    return get_app_data_dir() / "logs" / LOG_FILE_NAME
