"""Logging configuration for queuecast."""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "queuecast"


def _generate_timestamped_filename(log_file: str) -> str:
    """Generate a timestamped log filename.

    Args:
        log_file: Original log file path

    Returns:
        Timestamped log file path with format: {name}_{YYYYMMDD_HHMMSS}.{ext}
    """
    log_path = Path(log_file).expanduser()
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return str(log_path.parent / f"{log_path.stem}_{timestamp}{log_path.suffix}")


def setup_logging(level: str = "INFO", format_type: str = "standard",
                  log_file: Optional[str] = None, max_file_size_mb: int = 10,
                  backup_count: int = 5) -> logging.Logger:
    """Set up logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Format type ("standard" or "json")
        log_file: Optional path to log file. If provided, enables file logging with rotation
        max_file_size_mb: Maximum size of each log file in MB before rotation
        backup_count: Number of backup log files to keep

    Returns:
        The queuecast application logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stdout stays reserved for command output such as `list`
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)

            timestamped_log_file = _generate_timestamped_filename(log_file)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=timestamped_log_file,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.getLogger(f"{ROOT_LOGGER_NAME}.logging").debug(
                f"File logging enabled: {timestamped_log_file} "
                f"(max: {max_file_size_mb}MB, backups: {backup_count})"
            )
        except OSError as e:
            # File logging is optional; keep the console handler
            logging.getLogger(f"{ROOT_LOGGER_NAME}.logging").warning(
                f"Failed to setup file logging to {log_file}: {e}"
            )

    return logging.getLogger(ROOT_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance under the queuecast namespace
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
