"""Pytest configuration and fixtures for email sink tests.

Provides reusable fixtures for unit tests including connection settings,
log record factories, and a mocked aiosmtplib client.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Set test environment before importing application modules
os.environ.setdefault("SMTP_HOST", "smtp.test.com")
os.environ.setdefault("EMAIL_FROM", "noreply@test.com")
os.environ.setdefault("EMAIL_TO", "ops@test.com")
os.environ.setdefault("LOG_TO_FILE", "false")


# =============================================================================
# Connection Settings Fixtures
# =============================================================================
@pytest.fixture
def connection_settings():
    """Create ConnectionSettings for a plain relay without credentials."""
    from email_sink.models.connection import ConnectionSettings

    return ConnectionSettings(
        host="smtp.local",
        port=25,
        enable_ssl=False,
        from_email="a@x.com",
        to_email="b@x.com,c@x.com",
    )


@pytest.fixture
def authenticated_settings():
    """Create ConnectionSettings with credentials and TLS."""
    from email_sink.models.connection import ConnectionSettings

    return ConnectionSettings(
        host="smtp.test.com",
        port=465,
        enable_ssl=True,
        username="test@test.com",
        password="testpassword",
        from_email="noreply@test.com",
        to_email="ops@test.com",
    )


# =============================================================================
# Log Record Fixtures
# =============================================================================
@pytest.fixture
def make_record() -> Callable[..., logging.LogRecord]:
    """Factory for log records with a level and message."""

    def _make(level: int, msg: str, name: str = "app") -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 10, msg, None, None)

    return _make


# =============================================================================
# SMTP Client Fixtures
# =============================================================================
@pytest.fixture
def mock_smtp_client() -> MagicMock:
    """Create a mock aiosmtplib client tracking its connection state."""
    client = MagicMock()
    client.is_connected = False

    async def _connect(*args, **kwargs):
        client.is_connected = True

    async def _quit(*args, **kwargs):
        client.is_connected = False

    def _close():
        client.is_connected = False

    client.connect = AsyncMock(side_effect=_connect)
    client.login = AsyncMock(return_value=(235, "Authentication successful"))
    client.send_message = AsyncMock(return_value=({}, "OK"))
    client.quit = AsyncMock(side_effect=_quit)
    client.close = MagicMock(side_effect=_close)
    return client


@pytest.fixture
def patched_smtp(mock_smtp_client: MagicMock) -> Generator[MagicMock, None, None]:
    """Patch aiosmtplib.SMTP to return the mock client; yields the class mock."""
    with patch(
        "email_sink.clients.transport.aiosmtplib.SMTP",
        return_value=mock_smtp_client,
    ) as smtp_cls:
        yield smtp_cls


# =============================================================================
# Self-diagnostics Fixtures
# =============================================================================
@pytest.fixture
def selflog_records(caplog: pytest.LogCaptureFixture) -> Callable[[], list[logging.LogRecord]]:
    """Return a getter for records written to the self-diagnostics channel."""
    from email_sink.core.selflog import SELFLOG_NAME

    caplog.set_level(logging.DEBUG, logger=SELFLOG_NAME)

    def _records() -> list[logging.LogRecord]:
        return [r for r in caplog.records if r.name == SELFLOG_NAME]

    return _records
