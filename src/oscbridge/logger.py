"""
Logging infrastructure for oscbridge.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Format a copy, other handlers share the record
        if record.levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )
        return super().format(record)


class StructuredFormatter(logging.Formatter):
    """Structured formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        # Device context from DeviceLoggerAdapter, added to a copy so
        # formatting the same record twice (size-based rollover) stays stable
        if hasattr(record, 'device_id'):
            device_type = getattr(record, 'device_type', '?')
            record = logging.makeLogRecord(record.__dict__)
            record.msg = f"[{device_type}:{record.device_id}] {record.msg}"

        return super().format(record)


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_size: str = "10MB",
    backup_count: int = 5,
    console_output: bool = True
) -> logging.Logger:
    """
    Set up a logger with file rotation and optional console output.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        max_size: Maximum log file size before rotation
        backup_count: Number of backup files to keep
        console_output: Whether to output to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)

        console_format = ColoredFormatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_parse_size(max_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)

        file_format = StructuredFormatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_size: str = "10MB",
    backup_count: int = 5
) -> logging.Logger:
    """
    Get a logger instance with default configuration.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional rotating log file
        max_size: Maximum log file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Logger instance
    """
    return setup_logger(
        name=name,
        level=level,
        log_file=log_file,
        max_size=max_size,
        backup_count=backup_count,
        console_output=True
    )


def _parse_size(size_str: str) -> int:
    """
    Parse size string (e.g., '10MB', '1GB') to bytes.

    Args:
        size_str: Size string with unit

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    # Longest suffix first so "MB" is not read as "B"
    size_map = {
        'KB': 1024,
        'MB': 1024 * 1024,
        'GB': 1024 * 1024 * 1024,
        'B': 1,
    }

    for unit, multiplier in size_map.items():
        if size_str.endswith(unit):
            number = size_str[:-len(unit)].strip()
            try:
                return int(float(number) * multiplier)
            except ValueError:
                pass

    try:
        return int(size_str)
    except ValueError:
        return 10 * 1024 * 1024  # Default 10MB


class DeviceLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that tags records with the owning device."""

    def __init__(self, logger: logging.Logger, extra: dict):
        super().__init__(logger, extra)

    def process(self, msg: str, kwargs: dict) -> tuple:
        extra = dict(self.extra)
        extra.update(kwargs.get('extra', {}))
        kwargs['extra'] = extra
        return msg, kwargs


def get_device_adapter(
    device_type: str,
    device_id: str,
    logger: Optional[logging.Logger] = None
) -> DeviceLoggerAdapter:
    """
    Get a logger adapter with device context.

    Args:
        device_type: Raw device type (e.g., 'Orf')
        device_id: Device identifier
        logger: Base logger, defaults to the device module logger

    Returns:
        Logger adapter with device context
    """
    base = logger or logging.getLogger("oscbridge.devices")
    return DeviceLoggerAdapter(base, {'device_type': device_type, 'device_id': device_id})
