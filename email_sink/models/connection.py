"""SMTP connection model.

Defines the immutable Pydantic model holding everything the sink needs to
reach a relay and address its messages. Addresses are parsed here, so a
malformed address fails at construction instead of at send time.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

import re
import ssl
from email.utils import parseaddr
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NameEmail, field_validator
from pydantic.networks import validate_email

DEFAULT_PORT = 25

_RECIPIENT_SEPARATORS = re.compile(r"[,;]")


def parse_mailbox(value: Any) -> Any:
    """Parse one mailbox, keeping a display name only if one was written.

    Args:
        value: "a@x.com", "Name <a@x.com>", or an already parsed NameEmail.

    Returns:
        NameEmail with an empty name for bare addresses.
    """
    if not isinstance(value, str):
        return value
    name, address = validate_email(value)
    if not parseaddr(value)[0]:
        name = ""
    return NameEmail(name, address)


class ConnectionSettings(BaseModel):
    """SMTP relay and addressing configuration.

    Attributes:
        host: Relay hostname. Empty means no connection is attempted.
        port: Relay port (1-65535).
        enable_ssl: Use TLS from connect. STARTTLS is still negotiated
            when disabled and the server offers it.
        username: Authentication username (optional).
        password: Authentication password (optional).
        validate_certs: Verify the relay certificate.
        tls_context: Custom SSL context replacing the default validation.
        from_email: Sender mailbox.
        to_email: Recipient mailboxes, from a "," or ";" delimited string.
        is_body_html: Send the body as text/html instead of text/plain.
        timeout: Transport timeout in seconds.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    host: str = Field(default="", description="SMTP relay hostname")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="SMTP relay port")
    enable_ssl: bool = Field(default=False, description="Use TLS on connect")
    username: str | None = Field(default=None, description="SMTP authentication username")
    password: str | None = Field(default=None, description="SMTP authentication password")
    validate_certs: bool = Field(default=True, description="Verify relay certificate")
    tls_context: ssl.SSLContext | None = Field(
        default=None, description="Custom certificate validation context"
    )
    from_email: NameEmail = Field(..., description="Sender mailbox")
    to_email: tuple[NameEmail, ...] = Field(
        ..., min_length=1, description="Recipient mailboxes"
    )
    is_body_html: bool = Field(default=False, description="Body is HTML")
    timeout: float = Field(default=60, gt=0, description="Transport timeout (seconds)")

    @field_validator("host", mode="before")
    @classmethod
    def strip_host(cls, v: Any) -> Any:
        """Normalise the relay host; None and whitespace mean no relay."""
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("from_email", mode="before")
    @classmethod
    def parse_sender(cls, v: Any) -> Any:
        """Parse the sender mailbox."""
        return parse_mailbox(v)

    @field_validator("to_email", mode="before")
    @classmethod
    def split_recipients(cls, v: Any) -> Any:
        """Split a delimited recipient string into separate mailboxes.

        Args:
            v: "a@x.com,b@x.com;c@x.com" or an already split sequence.

        Returns:
            List of parsed, non-empty recipient mailboxes.
        """
        if isinstance(v, str):
            v = [part.strip() for part in _RECIPIENT_SEPARATORS.split(v) if part.strip()]
        if isinstance(v, (list, tuple)):
            return [parse_mailbox(part) for part in v]
        return v

    @property
    def has_credentials(self) -> bool:
        """Whether a login should follow the connect."""
        return bool(self.username)

    @property
    def recipient_addresses(self) -> tuple[str, ...]:
        """Bare recipient addresses, in configured order."""
        return tuple(addr.email for addr in self.to_email)
