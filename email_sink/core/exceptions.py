"""Custom exceptions for the email log sink.

Separates construction-time failures (bad configuration, bad call) from
delivery failures, which the sink contains and reports instead of raising.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""


class EmailSinkError(Exception):
    """Base exception for all email sink errors.

    Allows consumers to catch every sink-related error with a single
    except block.

    Example:
        try:
            sink = EmailSink(settings.get_connection_settings())
        except EmailSinkError as e:
            logger.error(f"Email sink unavailable: {e}")
    """

    pass


class EmailSinkConfigError(EmailSinkError):
    """Exception raised for configuration errors.

    Indicates a missing connection configuration or invalid settings loaded
    from the environment. Always raised at construction time.

    Example:
        raise EmailSinkConfigError("EMAIL_TO environment variable not set")
    """

    pass


class InvalidBatchError(EmailSinkError, ValueError):
    """Exception raised when a batch call receives no sequence at all.

    An empty sequence is a valid batch; ``None`` is not.
    """

    pass


class TransportError(EmailSinkError):
    """Exception raised for SMTP connection/authentication failures.

    Attributes:
        message (str): Description of the SMTP error.
        is_transient (bool): Whether error is temporary (retry may succeed).

    Example:
        raise TransportError(
            "Connection timeout to smtp.local:25",
            is_transient=True
        )
    """

    def __init__(self, message: str, is_transient: bool = False):
        """Initialize transport error.

        Args:
            message: Error description.
            is_transient: Whether error is temporary and retryable.
        """
        super().__init__(message)
        self.is_transient = is_transient
