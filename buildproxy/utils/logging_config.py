"""
Logging setup for the build proxy.

Driven by environment variables:
- LOG_LEVEL (or LOGLEVEL): level name, INFO by default and WARNING under pytest
- LOG_FORMAT: standard, dev or json
- LOG_FILE: when set, also write to a rotating file at that path
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional


LOG_FORMATS = {
    'standard': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'dev': '%(asctime)s [%(levelname)8s] %(name)s:%(lineno)d - %(message)s',
    'json': '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
}

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def parse_level(name: str) -> int:
    """Map a level name such as "debug" or "WARN" to its logging constant."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


class LogConfig:
    """Reads logging options from the environment."""

    @staticmethod
    def get_log_level() -> int:
        level_name = os.getenv('LOG_LEVEL', os.getenv('LOGLEVEL'))
        if level_name:
            return parse_level(level_name)

        # Keep test output quiet unless asked otherwise
        if 'pytest' in sys.modules or 'PYTEST_CURRENT_TEST' in os.environ:
            return logging.WARNING

        return logging.INFO

    @staticmethod
    def get_log_format(format_type: Optional[str] = None) -> str:
        format_type = (format_type or os.getenv('LOG_FORMAT', 'standard')).lower()
        return LOG_FORMATS.get(format_type, LOG_FORMATS['standard'])

    @staticmethod
    def get_log_file_path() -> Optional[Path]:
        log_file = os.getenv('LOG_FILE')
        return Path(log_file) if log_file else None


_configured = False


def setup_logging(format_type: Optional[str] = None) -> None:
    """Configure the root logger once: stdout, plus a rotating file if LOG_FILE is set."""
    global _configured
    if _configured:
        return

    level = LogConfig.get_log_level()
    formatter = logging.Formatter(LogConfig.get_log_format(format_type))

    handlers = [logging.StreamHandler(sys.stdout)]

    log_file = LogConfig.get_log_file_path()
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger, configuring logging on first use."""
    setup_logging()
    return logging.getLogger(name or "buildproxy")
