"""Email Sink - batched log delivery over SMTP.

Turns batches of logging records into email messages:
- One message per batch, records rendered in logging order
- Subject taken from the most severe record in the batch
- One SMTP connection per batch (aiosmtplib), always released
- Delivery failures reported on a self-diagnostics logger, never raised

Architecture:
    - EmailSink: renders a batch and delivers it
    - EmailBatchHandler: logging handler that buffers records into batches
    - open_connected_client: scoped SMTP connection per batch
    - SinkConfig: Pydantic v2 settings from environment / .env

Modules:
    - core: Exceptions, logger, self-diagnostics channel
    - config: Pydantic v2 settings
    - models: ConnectionSettings, DeliveryOutcome
    - clients: SMTP transport (aiosmtplib)
    - sinks: Batched sink contract, EmailSink, formatters
    - handlers: logging integration

Usage:
    import logging

    from email_sink import EmailBatchHandler, SinkConfig

    handler = EmailBatchHandler.from_settings(SinkConfig())
    handler.setLevel(logging.ERROR)
    logging.getLogger().addHandler(handler)

    # Or drive the sink directly from an async batching host
    from email_sink import ConnectionSettings, EmailSink

    sink = EmailSink(ConnectionSettings(
        host="smtp.local",
        from_email="alerts@example.com",
        to_email="ops@example.com;dev@example.com",
    ))
    outcome = await sink.emit_batch(records)

Author: Odiseo
Created: 2025-10-18
Version: 2.0.0
"""

__version__ = "2.0.0"

# Clients
from email_sink.clients import open_connected_client

# Configuration
from email_sink.config import SinkConfig

# Core utilities
from email_sink.core import (
    EmailSinkConfigError,
    EmailSinkError,
    InvalidBatchError,
    TransportError,
    get_logger,
    setup_logging,
)

# Handlers
from email_sink.handlers import EmailBatchHandler

# Models
from email_sink.models import ConnectionSettings, DeliveryOutcome

# Sinks
from email_sink.sinks import (
    BatchedSink,
    BodyFormatter,
    EmailSink,
    FixedTextFormatter,
    body_formatter,
    subject_formatter,
)

__all__ = [
    # Version
    "__version__",
    # Core exceptions
    "EmailSinkError",
    "EmailSinkConfigError",
    "InvalidBatchError",
    "TransportError",
    "get_logger",
    "setup_logging",
    # Configuration
    "SinkConfig",
    # Models
    "ConnectionSettings",
    "DeliveryOutcome",
    # Clients
    "open_connected_client",
    # Sinks
    "BatchedSink",
    "EmailSink",
    "BodyFormatter",
    "FixedTextFormatter",
    "body_formatter",
    "subject_formatter",
    # Handlers
    "EmailBatchHandler",
]
