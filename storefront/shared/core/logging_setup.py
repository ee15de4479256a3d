"""Logging configuration for the storefront client.

File handler: everything at the configured level, rotated.
Console handler: warnings and errors only.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from storefront.shared.core.configuration import LoggingConfig

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Third-party loggers that are too chatty at DEBUG
NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "asyncio")


def _resolve_level(name: str, default: int) -> int:
    return LOG_LEVEL_MAP.get(name.upper(), default)


def configure_logging(config: Optional[LoggingConfig] = None, base_dir: Optional[Path] = None) -> Path:
    """Install file and console handlers on the root logger.

    Args:
        config: Logging section of the system configuration
        base_dir: Directory that a relative ``log_dir`` is resolved against

    Returns:
        Path of the log file
    """
    config = config or LoggingConfig()
    logs_dir = Path(config.log_dir)
    if not logs_dir.is_absolute():
        logs_dir = (base_dir or Path.cwd()) / logs_dir
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_dir / config.log_file

    file_log_level = _resolve_level(config.level, logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(_resolve_level(config.console_level, logging.WARNING))
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured: file={log_file_path}, console={config.console_level}+")
    return log_file_path
