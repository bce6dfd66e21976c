"""Persistent defaults for FTP transfers.

TransferSettings carries the connection defaults together with the
buffer and cache sizes FTPTransfer reads and writes with. SettingsManager
stores them as JSON; values that would make a transfer fail are repaired
to their defaults on load and refused on save.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional

from ftp_transfer.config.paths import get_settings_path

logger = logging.getLogger("ftp_transfer.settings")

# Shared with FTPConnectionConfig
MIN_PORT, MAX_PORT = 1, 65535
MIN_TIMEOUT, MAX_TIMEOUT = 5, 300

# Buffer and cache are only valid together
_SIZE_FIELDS = ("buffer_size", "max_cache_size")


@dataclass
class TransferSettings:
    """Connection defaults and transfer sizes that persist between sessions."""

    host: str = ""
    port: int = 21
    username: str = "anonymous"
    passive_mode: bool = True
    timeout: int = 30

    # Bytes per read and download cache capacity
    buffer_size: int = 2048
    max_cache_size: int = 2097152

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TransferSettings":
        """
        Create settings from a decoded JSON object.

        Unknown keys are ignored. A value whose JSON type differs from the
        field's default (e.g. "2048" for buffer_size, 1 for passive_mode)
        is dropped in favour of the default.
        """
        defaults = cls()
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            expected = type(getattr(defaults, f.name))
            if type(value) is not expected:
                logger.warning(
                    f"Ignoring setting {f.name}={value!r}: expected {expected.__name__}"
                )
                continue
            values[f.name] = value
        return cls(**values)

    def invalid_fields(self) -> Dict[str, str]:
        """Map each out-of-range field to a description of the problem."""
        problems = {}
        if not MIN_PORT <= self.port <= MAX_PORT:
            problems["port"] = f"Port must be between {MIN_PORT} and {MAX_PORT}, got {self.port}"
        if not MIN_TIMEOUT <= self.timeout <= MAX_TIMEOUT:
            problems["timeout"] = (
                f"Timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT}, got {self.timeout}"
            )
        if self.buffer_size < 1:
            problems["buffer_size"] = f"Buffer size must be positive, got {self.buffer_size}"
        elif self.max_cache_size < self.buffer_size:
            problems["max_cache_size"] = (
                f"Cache size {self.max_cache_size} is smaller than buffer size {self.buffer_size}"
            )
        return problems

    def validate(self) -> None:
        """Raise ValueError listing every out-of-range field."""
        problems = self.invalid_fields()
        if problems:
            raise ValueError("; ".join(problems.values()))

    def repaired(self) -> "TransferSettings":
        """Copy with every out-of-range field reset to its default."""
        names = set(self.invalid_fields())
        if names.intersection(_SIZE_FIELDS):
            names.update(_SIZE_FIELDS)
        defaults = TransferSettings()
        return replace(self, **{name: getattr(defaults, name) for name in names})


class SettingsManager:
    """Loads and stores TransferSettings as a JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Settings file, defaults to paths.get_settings_path()
        """
        self._config_path = config_path or get_settings_path()

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(self) -> TransferSettings:
        """
        Read settings from disk.

        A missing, unreadable or malformed file gives the defaults.
        Out-of-range values are logged and replaced by their defaults.
        """
        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return TransferSettings()
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot read settings from {self._config_path}: {e}")
            return TransferSettings()

        if not isinstance(data, dict):
            logger.warning(f"Settings file {self._config_path} does not hold an object")
            return TransferSettings()

        settings = TransferSettings.from_dict(data)
        for name, problem in settings.invalid_fields().items():
            logger.warning(f"Resetting {name} to default: {problem}")
        return settings.repaired()

    def save(self, settings: TransferSettings) -> None:
        """
        Write settings to disk, creating the parent directory.

        Raises:
            ValueError: If any field is out of range; nothing is written
        """
        settings.validate()
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)

    def update(self, **changes) -> TransferSettings:
        """
        Change some fields of the stored settings and save them.

        Raises:
            TypeError: If a field name is unknown
            ValueError: If the result is out of range; nothing is written
        """
        settings = replace(self.load(), **changes)
        self.save(settings)
        return settings
