"""Centralized logging configuration for the email log sink.

Provides the logger factory with file rotation, multiple handlers,
and consistent formatting across all sink components.

Features:
    - Dual output: Console (stdout) + File handlers
    - Automatic log file rotation (10MB, 5 backups)
    - Separate error log
    - Configurable log levels per module
    - Structured context strings for batch deliveries

Author: Odiseo
Created: 2025-10-18
Version: 2.1.0
"""

import logging
import logging.handlers
import sys
from pathlib import Path

# Global configuration
_ROOT_LOGGER: logging.Logger | None = None
_LOG_DIR = Path(__file__).parent.parent / "logs"
_LOG_FORMAT_DETAILED = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
_LOG_FORMAT_SIMPLE = "%(asctime)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level logger configuration
_MODULE_LEVELS = {
    "email_sink.sinks": logging.DEBUG,
    "email_sink.clients": logging.DEBUG,
    "email_sink.handlers": logging.INFO,
    "email_sink.config": logging.INFO,
}


def setup_logging(
    log_dir: Path | None = None,
    log_level: str = "INFO",
    file_level: str = "DEBUG",
    console_level: str = "INFO",
    enable_file: bool = True,
) -> None:
    """Configure root logger with file and console handlers.

    Should be called once at application startup, before any
    EmailBatchHandler is attached.

    Args:
        log_dir: Directory for log files. Defaults to email_sink/logs.
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_level: File handler level (usually DEBUG for comprehensive logging).
        console_level: Console handler level (usually INFO to reduce noise).
        enable_file: Whether to write logs to files.

    Example:
        setup_logging(
            log_level="INFO",
            file_level="DEBUG",
            console_level="WARNING",  # Only show warnings and errors on console
        )
    """
    global _ROOT_LOGGER, _LOG_DIR

    if log_dir:
        _LOG_DIR = Path(log_dir)
    else:
        _LOG_DIR = Path(__file__).parent.parent / "logs"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    console_handler.setFormatter(
        logging.Formatter(_LOG_FORMAT_SIMPLE, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(console_handler)

    if enable_file:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)

        # RotatingFileHandler: 10MB per file, keep 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "email_sink.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        file_handler.setFormatter(
            logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "email_sink.error.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(error_handler)

    for module_name, level in _MODULE_LEVELS.items():
        logging.getLogger(module_name).setLevel(level)

    _ROOT_LOGGER = root_logger


def get_logger(name: str, log_level: str | None = None) -> logging.Logger:
    """Get a configured logger instance for a module.

    Args:
        name: Logger name (typically __name__ of calling module).
        log_level: Optional override for logger level (DEBUG, INFO, WARNING, ERROR).

    Returns:
        Configured logger instance ready for use.

    Example:
        from email_sink.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("Delivering batch of 12 records")
    """
    logger = logging.getLogger(name)

    if log_level:
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


def log_context(
    operation: str,
    record_count: int | None = None,
    recipients: list[str] | None = None,
    **kwargs,
) -> str:
    """Format a log context string with batch metadata.

    Args:
        operation: Operation name (e.g., "emit_batch", "connect").
        record_count: Number of records in the batch if applicable.
        recipients: Recipient addresses if applicable.
        **kwargs: Additional context key-value pairs.

    Returns:
        Formatted context string for logging.

    Example:
        msg = log_context(
            "emit_batch",
            record_count=2,
            recipients=["ops@example.com"],
            host="smtp.local",
        )
        # Output: [2 records] | emit_batch | →ops@example.com (host=smtp.local)
    """
    context_parts = [operation]

    if record_count is not None:
        context_parts.insert(0, f"[{record_count} records]")

    if recipients:
        context_parts.append(f"→{','.join(recipients)}")

    context = " | ".join(context_parts)

    if kwargs:
        extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        context = f"{context} ({extra})"

    return context
