"""Logging configuration for the FTP transfer helpers.

Every module logs to a child of the "ftp_transfer" logger. setup_logging
attaches console and file handlers to that logger, all formatted by
PIIRedactingFormatter so FTP passwords never reach log output.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional, Union

from ftp_transfer.config.paths import get_log_file_path


LOGGER_NAME = "ftp_transfer"

# Set on handlers installed by setup_logging
_OWNED_ATTR = "_ftp_transfer_handler"

# Credential patterns to redact from logs
REDACT_PATTERNS = [
    (re.compile(r'(password["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(passwd["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    # ftplib debug output of the login command
    (re.compile(r'(PASS\s+)\S+'), r'\1[REDACTED]'),
    (re.compile(r'ftp://[^:/@\s]+:[^@\s]+@'), 'ftp://[REDACTED]@'),
]


def redact(text: str) -> str:
    """Mask every credential REDACT_PATTERNS recognizes in text."""
    for pattern, replacement in REDACT_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that masks credentials, tracebacks included."""

    def format(self, record: logging.LogRecord) -> str:
        return redact(super().format(record))


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Union[Path, str, bool, None] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure the package logger with credential redaction.

    Calling it again replaces the handlers it installed before; handlers
    added by the application are left alone.

    Args:
        level: Level number or name, e.g. logging.DEBUG or "debug"
        log_file: File to append to; True selects paths.get_log_file_path()
        console: Whether to log to stderr

    Returns:
        The "ftp_transfer" logger
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if getattr(h, _OWNED_ATTR, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = PIIRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if log_file is True:
        log_file = get_log_file_path()
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger in the package hierarchy."""
    return logging.getLogger(name)
