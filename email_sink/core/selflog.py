"""Self-diagnostics channel for the email log sink.

Internal failures of the sink are reported here rather than raised to the
caller. The channel is an ordinary logger, so applications route it with
the usual handlers; EmailBatchHandler drops its records so a failing relay
never produces more email.

Version: 1.0.0
"""

from __future__ import annotations

from email_sink.core.logger import get_logger

SELFLOG_NAME = "email_sink.selflog"

selflog = get_logger(SELFLOG_NAME)


def selflog_write(message: str, *args: object, exc_info: bool = False) -> None:
    """Write one line to the self-diagnostics channel.

    Args:
        message: %-style message.
        *args: Message arguments.
        exc_info: Attach the active exception's traceback.
    """
    selflog.warning(message, *args, exc_info=exc_info)
