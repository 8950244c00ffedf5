"""Email sink - delivers batches of log records as one email each.

Renders every record of a batch into a single body, takes the subject from
the most severe record, and sends the message over a connection opened for
that batch alone. Delivery failures are reported on the self-diagnostics
channel and in the returned outcome; they never reach the batching host.

Version: 2.0.0
"""

from __future__ import annotations

import logging
from email.header import Header
from email.mime.text import MIMEText
from email.utils import formataddr
from operator import attrgetter
from typing import Iterable, Sequence

from pydantic import NameEmail

from email_sink.clients.transport import is_transient_error, open_connected_client
from email_sink.core.exceptions import EmailSinkConfigError, InvalidBatchError
from email_sink.core.logger import get_logger, log_context
from email_sink.core.selflog import selflog_write
from email_sink.models.connection import ConnectionSettings
from email_sink.models.outcome import DeliveryOutcome
from email_sink.sinks.formatting import (
    DEFAULT_SUBJECT,
    TextFormatter,
    body_formatter,
    subject_formatter,
)

logger = get_logger(__name__)

UNSUPPORTED_EMIT_NOTICE = "The email sink only supports batched log events."


def _format_mailbox(address: NameEmail) -> str:
    return formataddr((address.name, address.email), charset="utf-8")


class EmailSink:
    """Batched log sink delivering over SMTP.

    Attributes:
        connection_info: Immutable relay and addressing configuration.
        text_formatter: Renders each record into the body.
        subject_formatter: Renders the subject from the most severe record.
    """

    def __init__(
        self,
        connection_info: ConnectionSettings,
        text_formatter: TextFormatter | None = None,
        subject_line_formatter: TextFormatter | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            connection_info: Relay and addressing configuration.
            text_formatter: Body formatter (default output template if None).
            subject_line_formatter: Subject formatter ("Log Messages" if None).

        Raises:
            EmailSinkConfigError: If connection_info is missing.
        """
        if connection_info is None:
            raise EmailSinkConfigError("connection_info is required")

        self.connection_info = connection_info
        self.text_formatter = text_formatter or body_formatter()
        self.subject_formatter = subject_line_formatter or subject_formatter(DEFAULT_SUBJECT)

        logger.info(
            f"Email sink initialized: {connection_info.host or '(no relay)'}:"
            f"{connection_info.port} → {', '.join(connection_info.recipient_addresses)}"
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Single-record path. Deliberately does nothing.

        The sink only delivers whole batches; this writes one notice to the
        self-diagnostics channel and performs no I/O.
        """
        selflog_write(UNSUPPORTED_EMIT_NOTICE)

    def render_body(self, records: Sequence[logging.LogRecord]) -> str:
        """Concatenate every rendered record in input order."""
        return "".join(self.text_formatter.format(record) for record in records)

    def render_subject(self, records: Sequence[logging.LogRecord]) -> str:
        """Render the subject from the first record of highest severity.

        Raises:
            ValueError: If the batch is empty.
        """
        # max() keeps the first of equal keys
        record = max(records, key=attrgetter("levelno"))
        return " ".join(self.subject_formatter.format(record).splitlines())

    def build_message(self, payload: str, subject: str) -> MIMEText:
        """Build the outgoing message for one batch.

        Args:
            payload: Rendered body.
            subject: Rendered subject line.

        Returns:
            text/html or text/plain message addressed to all recipients.
        """
        info = self.connection_info
        subtype = "html" if info.is_body_html else "plain"

        msg = MIMEText(payload, subtype, "utf-8")
        msg["From"] = _format_mailbox(info.from_email)
        msg["To"] = ", ".join(_format_mailbox(addr) for addr in info.to_email)
        msg["Subject"] = subject if subject.isascii() else Header(subject, "utf-8")
        return msg

    async def emit_batch(
        self, records: Iterable[logging.LogRecord] | None
    ) -> DeliveryOutcome:
        """Deliver a batch of records as a single email.

        Args:
            records: Records in the order they were logged.

        Returns:
            Outcome of the attempt. Failures are reported here and on the
            self-diagnostics channel, never raised.

        Raises:
            InvalidBatchError: If records is None.
        """
        if records is None:
            raise InvalidBatchError("records must not be None")

        batch = list(records)
        info = self.connection_info
        recipients = info.recipient_addresses
        ctx = log_context(
            "emit_batch",
            record_count=len(batch),
            recipients=list(recipients),
            host=info.host or "-",
        )

        subject: str | None = None
        try:
            logger.debug(f"Starting: {ctx}")
            payload = self.render_body(batch)
            subject = self.render_subject(batch)
            message = self.build_message(payload, subject)

            async with open_connected_client(info) as client:
                await client.send_message(
                    message,
                    sender=info.from_email.email,
                    recipients=list(recipients),
                )
                await client.quit()

        except Exception as e:
            selflog_write("Failed to send email: %s", e, exc_info=True)
            return DeliveryOutcome(
                delivered=False,
                record_count=len(batch),
                recipients=recipients,
                subject=subject,
                error=f"{type(e).__name__}: {e}",
                is_transient=is_transient_error(e),
            )

        logger.info(f"COMPLETED: {ctx} | Subject: {subject[:50]}")
        return DeliveryOutcome(
            delivered=True,
            record_count=len(batch),
            recipients=recipients,
            subject=subject,
        )

    async def on_empty_batch(self) -> None:
        """Idle hook for hosts that poll; no I/O."""
        return None
