"""Sinks module for the email log sink.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from email_sink.sinks.base import BatchedSink
from email_sink.sinks.email import UNSUPPORTED_EMIT_NOTICE, EmailSink
from email_sink.sinks.formatting import (
    DEFAULT_OUTPUT_TEMPLATE,
    DEFAULT_SUBJECT,
    BodyFormatter,
    FixedTextFormatter,
    TextFormatter,
    body_formatter,
    subject_formatter,
)

__all__ = [
    "BatchedSink",
    "EmailSink",
    "UNSUPPORTED_EMIT_NOTICE",
    "DEFAULT_OUTPUT_TEMPLATE",
    "DEFAULT_SUBJECT",
    "BodyFormatter",
    "FixedTextFormatter",
    "TextFormatter",
    "body_formatter",
    "subject_formatter",
]
