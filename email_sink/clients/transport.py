"""SMTP transport acquisition for batch delivery.

Opens one aiosmtplib connection per batch: connect, optionally
authenticate, hand the client to the caller, and release it on every exit
path. Connections are never reused between batches.

Features:
- Implicit TLS or opportunistic STARTTLS
- Custom certificate validation via SSL context
- Transient error detection for the delivery outcome

Author: Odiseo
Version: 2.1.0
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiosmtplib

from email_sink.core.exceptions import TransportError
from email_sink.core.logger import get_logger
from email_sink.models.connection import ConnectionSettings

logger = get_logger(__name__)

_TRANSIENT_KEYWORDS = (
    "timeout",
    "timed out",
    "connection",
    "temporarily",
    "try again",
    "unavailable",
    "service",
    "refused",
    "reset",
    "broken pipe",
)


def create_client(info: ConnectionSettings) -> aiosmtplib.SMTP:
    """Build an unconnected SMTP client from connection settings.

    Args:
        info: Relay configuration.

    Returns:
        aiosmtplib client with TLS and certificate policy installed.
    """
    return aiosmtplib.SMTP(
        hostname=info.host or None,
        port=info.port,
        use_tls=info.enable_ssl,
        validate_certs=info.validate_certs,
        tls_context=info.tls_context,
        timeout=info.timeout,
    )


async def _connect(client: aiosmtplib.SMTP, info: ConnectionSettings) -> None:
    """Connect and, when credentials are configured, authenticate.

    Raises:
        TransportError: If the relay cannot be reached or rejects the login.
    """
    try:
        logger.debug(f"Connecting to SMTP: {info.host}:{info.port} (tls={info.enable_ssl})")
        await client.connect()
    except Exception as e:
        raise TransportError(
            f"Failed to connect to SMTP server {info.host}:{info.port}: {e}",
            is_transient=is_transient_error(e),
        ) from e

    if not info.has_credentials:
        return

    try:
        logger.debug("Authenticating...")
        await client.login(info.username, info.password or "")
    except Exception as e:
        raise TransportError(
            f"SMTP authentication failed for {info.username}@{info.host}: {e}",
            is_transient=is_transient_error(e),
        ) from e


@asynccontextmanager
async def open_connected_client(info: ConnectionSettings) -> AsyncIterator[aiosmtplib.SMTP]:
    """Yield a client ready to send exactly one message.

    With no relay host configured the client is yielded unconnected and the
    send itself fails.

    Args:
        info: Relay configuration.

    Yields:
        Connected (and authenticated, if configured) SMTP client.

    Raises:
        TransportError: If connecting or authenticating fails.
    """
    client = create_client(info)
    try:
        if info.host:
            await _connect(client, info)
            logger.debug("SMTP connection established")
        else:
            logger.debug("No SMTP host configured, client left unconnected")
        yield client
    finally:
        if client.is_connected:
            client.close()
            logger.debug("SMTP client closed")


def is_transient_error(error: BaseException) -> bool:
    """Determine if error is temporary (retryable).

    Args:
        error: Exception to analyze.

    Returns:
        True if error is likely transient and retry may succeed.
    """
    if isinstance(error, TransportError):
        return error.is_transient
    if isinstance(error, (TimeoutError, ConnectionError)):
        return True
    error_str = str(error).lower()
    return any(keyword in error_str for keyword in _TRANSIENT_KEYWORDS)
