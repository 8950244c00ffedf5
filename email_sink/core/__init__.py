"""Core module for the email log sink.

Provides exceptions, logging configuration, and the self-diagnostics channel.

Author: Odiseo
Created: 2025-10-18
Version: 2.0.0
"""

from email_sink.core.exceptions import (
    EmailSinkConfigError,
    EmailSinkError,
    InvalidBatchError,
    TransportError,
)
from email_sink.core.logger import (
    get_logger,
    log_context,
    setup_logging,
)
from email_sink.core.selflog import SELFLOG_NAME, selflog, selflog_write

__all__ = [
    # Exceptions
    "EmailSinkError",
    "EmailSinkConfigError",
    "InvalidBatchError",
    "TransportError",
    # Logging
    "get_logger",
    "setup_logging",
    "log_context",
    # Self-diagnostics
    "SELFLOG_NAME",
    "selflog",
    "selflog_write",
]
