"""Logging handlers for the email log sink.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from email_sink.handlers.batch import (
    DEFAULT_BATCH_SIZE,
    EmailBatchHandler,
    ExcludeSinkRecords,
)

__all__ = ["DEFAULT_BATCH_SIZE", "EmailBatchHandler", "ExcludeSinkRecords"]
