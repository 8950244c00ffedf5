"""Email sink configuration with Pydantic v2.

Manages relay, addressing, formatting, and batching settings loaded from
environment variables or .env file.

All settings can be overridden via environment variables.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from email_sink.core.exceptions import EmailSinkConfigError
from email_sink.models.connection import DEFAULT_PORT, ConnectionSettings
from email_sink.sinks.formatting import DEFAULT_OUTPUT_TEMPLATE, DEFAULT_SUBJECT


class SinkConfig(BaseSettings):
    """Email sink configuration.

    Loads settings from environment variables and .env file using Pydantic v2.
    All settings are case-sensitive and strictly validated.

    Attributes:
        SMTP_HOST: SMTP relay hostname (empty disables connecting).
        SMTP_PORT: SMTP relay port (1-65535).
        SMTP_ENABLE_SSL: Whether to use TLS on connect.
        SMTP_USER: SMTP authentication username.
        SMTP_PASSWORD: SMTP authentication password.
        SMTP_VALIDATE_CERTS: Whether to verify the relay certificate.
        SMTP_TIMEOUT: Transport timeout in seconds.
        EMAIL_FROM: Sender mailbox.
        EMAIL_TO: Recipient mailboxes, "," or ";" delimited.
        EMAIL_BODY_IS_HTML: Send bodies as text/html.
        EMAIL_SUBJECT: Subject text or %-style record template.
        EMAIL_OUTPUT_TEMPLATE: %-style template for each body line.
        EMAIL_BATCH_SIZE: Records buffered before a batch is sent.
        EMAIL_FLUSH_LEVEL: Level that forces an immediate batch.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_TO_FILE: Whether to log to file.
        LOG_DIR: Directory for log files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ========================================================================
    # SMTP Configuration
    # ========================================================================
    SMTP_HOST: str = Field(
        default="",
        description="SMTP relay hostname",
    )
    SMTP_PORT: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="SMTP relay port",
    )
    SMTP_ENABLE_SSL: bool = Field(
        default=False,
        description="Whether to use TLS on connect",
    )
    SMTP_USER: str = Field(
        default="",
        description="SMTP authentication username",
    )
    SMTP_PASSWORD: str = Field(
        default="",
        description="SMTP authentication password",
    )
    SMTP_VALIDATE_CERTS: bool = Field(
        default=True,
        description="Whether to verify the relay certificate",
    )
    SMTP_TIMEOUT: int = Field(
        default=60,
        ge=1,
        le=300,
        description="SMTP transport timeout in seconds",
    )

    # ========================================================================
    # Message Configuration
    # ========================================================================
    EMAIL_FROM: str = Field(
        default="",
        description="Sender mailbox",
    )
    EMAIL_TO: str = Field(
        default="",
        description="Recipient mailboxes, comma or semicolon delimited",
    )
    EMAIL_BODY_IS_HTML: bool = Field(
        default=False,
        description="Send the body as HTML",
    )
    EMAIL_SUBJECT: str = Field(
        default=DEFAULT_SUBJECT,
        description="Subject text or %-style record template",
    )
    EMAIL_OUTPUT_TEMPLATE: str = Field(
        default=DEFAULT_OUTPUT_TEMPLATE,
        description="%-style template for each record in the body",
    )

    # ========================================================================
    # Batching Configuration
    # ========================================================================
    EMAIL_BATCH_SIZE: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Records buffered before a batch is sent",
    )
    EMAIL_FLUSH_LEVEL: str = Field(
        default="CRITICAL",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Level that forces an immediate batch",
    )

    # ========================================================================
    # Logging Configuration
    # ========================================================================
    LOG_LEVEL: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )
    LOG_TO_FILE: bool = Field(
        default=False,
        description="Whether to log to file",
    )
    LOG_DIR: str = Field(
        default="./logs",
        description="Directory for log files",
    )

    @field_validator("SMTP_HOST", "EMAIL_FROM", "EMAIL_TO")
    @classmethod
    def strip_value(cls, v: str) -> str:
        """Strip surrounding whitespace."""
        return v.strip()

    @field_validator("SMTP_PASSWORD")
    @classmethod
    def validate_smtp_password(cls, v: str) -> str:
        """Validate and clean SMTP password.

        Automatically removes spaces from SMTP password (Gmail app passwords
        are displayed with spaces for readability but must be used without spaces).

        Args:
            v: Password value to validate.

        Returns:
            Validated and cleaned password (spaces removed).
        """
        return v.replace(" ", "")

    @property
    def flush_level(self) -> int:
        """EMAIL_FLUSH_LEVEL as a numeric logging level."""
        return logging.getLevelName(self.EMAIL_FLUSH_LEVEL)

    def validate_smtp_config(self) -> None:
        """Validate the addressing settings needed to build a sink.

        Raises:
            EmailSinkConfigError: If required settings are missing.
        """
        missing_fields = []

        if not self.EMAIL_FROM:
            missing_fields.append("EMAIL_FROM")

        if not self.EMAIL_TO:
            missing_fields.append("EMAIL_TO")

        if missing_fields:
            raise EmailSinkConfigError(
                f"Required email settings missing: {', '.join(missing_fields)}. "
                f"Set these environment variables to enable the email sink."
            )

    def get_connection_settings(self) -> ConnectionSettings:
        """Build the immutable connection settings for the sink.

        Returns:
            Parsed and validated ConnectionSettings.

        Raises:
            EmailSinkConfigError: If settings are missing or addresses are malformed.
        """
        self.validate_smtp_config()
        try:
            return ConnectionSettings(
                host=self.SMTP_HOST,
                port=self.SMTP_PORT,
                enable_ssl=self.SMTP_ENABLE_SSL,
                username=self.SMTP_USER or None,
                password=self.SMTP_PASSWORD or None,
                validate_certs=self.SMTP_VALIDATE_CERTS,
                from_email=self.EMAIL_FROM,
                to_email=self.EMAIL_TO,
                is_body_html=self.EMAIL_BODY_IS_HTML,
                timeout=self.SMTP_TIMEOUT,
            )
        except ValidationError as e:
            raise EmailSinkConfigError(f"Invalid email sink settings: {e}") from e
