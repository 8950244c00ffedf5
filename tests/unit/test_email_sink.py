"""Unit tests for EmailSink.

Tests batch rendering, subject selection, message construction, and the
contained handling of delivery failures.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import aiosmtplib
import pytest

from email_sink.core.exceptions import EmailSinkConfigError, InvalidBatchError
from email_sink.models.connection import ConnectionSettings
from email_sink.sinks.base import BatchedSink
from email_sink.sinks.email import UNSUPPORTED_EMIT_NOTICE, EmailSink
from email_sink.sinks.formatting import BodyFormatter


def _message_body(message) -> str:
    return message.get_payload(decode=True).decode("utf-8")


@pytest.fixture
def sink(connection_settings) -> EmailSink:
    """Sink rendering bare messages so bodies are easy to compare."""
    return EmailSink(
        connection_settings,
        BodyFormatter("%(message)s"),
        logging.Formatter("%(levelname)s: %(message)s"),
    )


class TestInit:
    """Tests for EmailSink construction."""

    def test_requires_connection_info(self):
        """Test a missing configuration fails immediately."""
        with pytest.raises(EmailSinkConfigError):
            EmailSink(None)

    def test_default_formatters(self, connection_settings, make_record):
        """Test defaults render a timestamped line and a fixed subject."""
        sink = EmailSink(connection_settings)
        record = make_record(logging.WARNING, "disk almost full")

        assert sink.render_body([record]).endswith("[WARNING] disk almost full\n")
        assert sink.render_subject([record]) == "Log Messages"

    def test_satisfies_batched_sink(self, sink):
        """Test the sink fulfils the batching host contract."""
        assert isinstance(sink, BatchedSink)


class TestSingleRecordPath:
    """Tests for the unsupported single-record path."""

    def test_emit_writes_notice_only(self, sink, make_record, patched_smtp, selflog_records):
        """Test emit logs exactly one notice and never builds a client."""
        sink.emit(make_record(logging.ERROR, "boom"))

        records = selflog_records()
        assert len(records) == 1
        assert records[0].getMessage() == UNSUPPORTED_EMIT_NOTICE
        patched_smtp.assert_not_called()


class TestRendering:
    """Tests for body and subject rendering."""

    def test_body_preserves_order(self, sink, make_record):
        """Test the body concatenates records in input order."""
        records = [make_record(logging.INFO, f"line {i}") for i in range(5)]

        assert sink.render_body(records) == "line 0\nline 1\nline 2\nline 3\nline 4\n"

    def test_body_single_record(self, sink, make_record):
        """Test a batch of one renders just that record."""
        assert sink.render_body([make_record(logging.INFO, "only")]) == "only\n"

    def test_body_adds_no_separator(self, connection_settings, make_record):
        """Test records are joined with nothing the formatter did not emit."""
        sink = EmailSink(connection_settings, logging.Formatter("<%(message)s>"))
        records = [make_record(logging.INFO, "a"), make_record(logging.INFO, "b")]

        assert sink.render_body(records) == "<a><b>"

    def test_subject_from_highest_severity(self, sink, make_record):
        """Test the most severe record supplies the subject."""
        records = [
            make_record(logging.INFO, "hello"),
            make_record(logging.CRITICAL, "down"),
            make_record(logging.ERROR, "boom"),
        ]

        assert sink.render_subject(records) == "CRITICAL: down"

    def test_subject_tie_uses_first(self, sink, make_record):
        """Test equal severities resolve to the earliest record."""
        records = [
            make_record(logging.DEBUG, "noise"),
            make_record(logging.ERROR, "first"),
            make_record(logging.ERROR, "second"),
        ]

        assert sink.render_subject(records) == "ERROR: first"

    def test_subject_single_line(self, sink, make_record):
        """Test line breaks in a rendered subject become spaces."""
        record = make_record(logging.ERROR, "multi\nline\nsubject")

        assert sink.render_subject([record]) == "ERROR: multi line subject"

    def test_subject_empty_batch_fails(self, sink):
        """Test an empty batch has no subject record."""
        with pytest.raises(ValueError):
            sink.render_subject([])


class TestBuildMessage:
    """Tests for message construction."""

    @pytest.mark.parametrize("payload", ["", "hello", "<b>boom</b>", "ünïcode ✓"])
    def test_html_body(self, connection_settings, payload):
        """Test HTML configuration yields a text/html body."""
        info = ConnectionSettings.model_validate({**dict(connection_settings), "is_body_html": True})
        message = EmailSink(info).build_message(payload, "subject")

        assert message.get_content_type() == "text/html"
        assert _message_body(message) == payload

    @pytest.mark.parametrize("payload", ["", "hello", "<b>boom</b>", "ünïcode ✓"])
    def test_plain_body(self, connection_settings, payload):
        """Test the default configuration yields a text/plain body."""
        message = EmailSink(connection_settings).build_message(payload, "subject")

        assert message.get_content_type() == "text/plain"
        assert _message_body(message) == payload

    def test_headers(self, sink):
        """Test sender, every recipient, and subject are set."""
        message = sink.build_message("body", "ERROR: boom")

        assert message["From"] == "a@x.com"
        assert message["To"] == "b@x.com, c@x.com"
        assert message["Subject"] == "ERROR: boom"

    def test_display_names_kept_when_given(self):
        """Test a configured display name appears in the address headers."""
        info = ConnectionSettings(
            from_email="Alerts <alerts@x.com>",
            to_email="Ops Team <ops@x.com>;b@x.com",
        )
        message = EmailSink(info).build_message("body", "subject")

        assert message["From"] == "Alerts <alerts@x.com>"
        assert message["To"] == "Ops Team <ops@x.com>, b@x.com"

    def test_ascii_subject_not_encoded(self, sink):
        """Test a plain ASCII subject is written as-is."""
        message = sink.build_message("body", "ERROR: boom")

        assert "Subject: ERROR: boom\n" in message.as_string()
        assert "=?utf-8?" not in message.as_string()

    def test_non_ascii_subject_encoded(self, sink):
        """Test a non-ASCII subject is RFC 2047 encoded and decodes back."""
        message = sink.build_message("body", "Fehler: Überlauf")

        assert str(message["Subject"]) == "Fehler: Überlauf"
        assert "=?utf-8?" in message.as_string()


class TestEmitBatch:
    """Tests for the batch delivery path."""

    @pytest.mark.asyncio
    async def test_none_batch_rejected(self, sink, patched_smtp):
        """Test a missing batch fails before any network action."""
        with pytest.raises(InvalidBatchError):
            await sink.emit_batch(None)

        patched_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_none_batch_is_value_error(self, sink, patched_smtp):
        """Test the rejection is catchable as ValueError."""
        with pytest.raises(ValueError):
            await sink.emit_batch(None)

    @pytest.mark.asyncio
    async def test_delivers_batch(self, sink, make_record, patched_smtp, mock_smtp_client):
        """Test two records to two recipients through one connection."""
        records = [
            make_record(logging.INFO, "hello"),
            make_record(logging.ERROR, "boom"),
        ]

        outcome = await sink.emit_batch(records)

        assert outcome.delivered is True
        assert outcome.error is None
        assert outcome.record_count == 2
        assert set(outcome.recipients) == {"b@x.com", "c@x.com"}
        assert outcome.subject == "ERROR: boom"

        kwargs = patched_smtp.call_args.kwargs
        assert kwargs["hostname"] == "smtp.local"
        assert kwargs["port"] == 25
        assert kwargs["use_tls"] is False

        mock_smtp_client.connect.assert_awaited_once()
        mock_smtp_client.login.assert_not_awaited()
        mock_smtp_client.send_message.assert_awaited_once()
        mock_smtp_client.quit.assert_awaited_once()
        assert not mock_smtp_client.is_connected

        call = mock_smtp_client.send_message.await_args
        message = call.args[0]
        assert call.kwargs["sender"] == "a@x.com"
        assert call.kwargs["recipients"] == ["b@x.com", "c@x.com"]
        assert _message_body(message) == "hello\nboom\n"
        assert str(message["Subject"]) == "ERROR: boom"

    @pytest.mark.asyncio
    async def test_accepts_generator(self, sink, make_record, patched_smtp, mock_smtp_client):
        """Test a one-shot iterable is rendered for both body and subject."""
        records = (make_record(level, msg) for level, msg in [(logging.INFO, "a"), (logging.WARNING, "b")])

        outcome = await sink.emit_batch(records)

        assert outcome.delivered is True
        assert outcome.subject == "WARNING: b"
        message = mock_smtp_client.send_message.await_args.args[0]
        assert _message_body(message) == "a\nb\n"

    @pytest.mark.asyncio
    async def test_authenticates_when_configured(
        self, authenticated_settings, make_record, patched_smtp, mock_smtp_client
    ):
        """Test configured credentials are used before sending."""
        sink = EmailSink(authenticated_settings)

        outcome = await sink.emit_batch([make_record(logging.ERROR, "boom")])

        assert outcome.delivered is True
        mock_smtp_client.login.assert_awaited_once_with("test@test.com", "testpassword")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stage", ["connect", "send_message", "quit"])
    async def test_transport_failure_contained(
        self, sink, make_record, patched_smtp, mock_smtp_client, selflog_records, stage
    ):
        """Test a failure at any stage is logged once and never raised."""
        setattr(
            mock_smtp_client,
            stage,
            AsyncMock(side_effect=aiosmtplib.SMTPException(f"{stage} exploded")),
        )

        outcome = await sink.emit_batch([make_record(logging.ERROR, "boom")])

        assert outcome.delivered is False
        assert f"{stage} exploded" in outcome.error
        records = selflog_records()
        assert len(records) == 1
        assert f"{stage} exploded" in records[0].getMessage()
        assert records[0].exc_info is not None
        assert not mock_smtp_client.is_connected

    @pytest.mark.asyncio
    async def test_login_failure_contained(
        self, authenticated_settings, make_record, patched_smtp, mock_smtp_client, selflog_records
    ):
        """Test a rejected login is reported and the connection released."""
        mock_smtp_client.login = AsyncMock(
            side_effect=aiosmtplib.SMTPAuthenticationError(535, "Bad credentials")
        )
        sink = EmailSink(authenticated_settings)

        outcome = await sink.emit_batch([make_record(logging.ERROR, "boom")])

        assert outcome.delivered is False
        assert "TransportError" in outcome.error
        assert len(selflog_records()) == 1
        mock_smtp_client.send_message.assert_not_awaited()
        mock_smtp_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_connect_refused_is_transient(
        self, sink, make_record, patched_smtp, mock_smtp_client
    ):
        """Test a refused connection is reported as transient."""
        mock_smtp_client.connect = AsyncMock(side_effect=ConnectionRefusedError("Connection refused"))

        outcome = await sink.emit_batch([make_record(logging.ERROR, "boom")])

        assert outcome.delivered is False
        assert outcome.is_transient is True

    @pytest.mark.asyncio
    async def test_empty_batch_contained(self, sink, patched_smtp, selflog_records):
        """Test an empty batch fails at subject selection without raising."""
        outcome = await sink.emit_batch([])

        assert outcome.delivered is False
        assert outcome.record_count == 0
        assert outcome.subject is None
        assert len(selflog_records()) == 1
        patched_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_relay_fails_at_send(self, make_record, patched_smtp, mock_smtp_client, selflog_records):
        """Test a blank host never connects and fails when sending."""
        mock_smtp_client.send_message = AsyncMock(
            side_effect=aiosmtplib.SMTPServerDisconnected("Not connected to SMTP server")
        )
        sink = EmailSink(ConnectionSettings(from_email="a@x.com", to_email="b@x.com"))

        outcome = await sink.emit_batch([make_record(logging.ERROR, "boom")])

        assert outcome.delivered is False
        assert "Not connected" in outcome.error
        mock_smtp_client.connect.assert_not_awaited()
        assert len(selflog_records()) == 1

    @pytest.mark.asyncio
    async def test_success_writes_no_diagnostics(self, sink, make_record, patched_smtp, selflog_records):
        """Test a delivered batch leaves the self-diagnostics channel empty."""
        await sink.emit_batch([make_record(logging.INFO, "hello")])

        assert selflog_records() == []


class TestIdleHook:
    """Tests for the idle-batch hook."""

    @pytest.mark.asyncio
    async def test_on_empty_batch(self, sink, patched_smtp, selflog_records):
        """Test the idle hook completes immediately with no transport use."""
        assert await sink.on_empty_batch() is None

        patched_smtp.assert_not_called()
        assert selflog_records() == []
