#!/usr/bin/env python3
"""Send a sample log batch through the configured email sink.

Checks the relay, credentials, and addressing end to end by delivering a
two-record batch exactly as the logging handler would.

Usage:
    python -m email_sink.scripts.send_test_batch
    python -m email_sink.scripts.send_test_batch --verbose
    python -m email_sink.scripts.send_test_batch --to ops@example.com
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from email_sink.config import SinkConfig
from email_sink.core.logger import get_logger, setup_logging
from email_sink.models.connection import ConnectionSettings
from email_sink.models.outcome import DeliveryOutcome
from email_sink.sinks.email import EmailSink
from email_sink.sinks.formatting import body_formatter, subject_formatter

logger = get_logger(__name__)


def print_header() -> None:
    """Print script header."""
    print("\n" + "=" * 80)
    print("  📧 Email Log Sink - Test Batch")
    print("=" * 80)


def print_footer() -> None:
    """Print script footer."""
    print("=" * 80 + "\n")


def print_config(config: SinkConfig) -> None:
    """Print loaded configuration (with credentials masked)."""
    print("\n📋 Loaded Configuration:")
    print(f"  SMTP Host:      {config.SMTP_HOST or '(not set)'}")
    print(f"  SMTP Port:      {config.SMTP_PORT}")
    print(f"  SMTP Username:  {config.SMTP_USER or '(none)'}")
    print(f"  SSL Enabled:    {'Yes' if config.SMTP_ENABLE_SSL else 'No'}")
    print(f"  From:           {config.EMAIL_FROM}")
    print(f"  To:             {config.EMAIL_TO}")
    print(f"  Body Format:    {'HTML' if config.EMAIL_BODY_IS_HTML else 'Plain text'}")


def sample_batch() -> list[logging.LogRecord]:
    """Build the two records sent as the test batch."""
    return [
        logging.LogRecord(
            "email_sink.test", logging.INFO, __file__, 0,
            "Test batch: informational record", None, None,
        ),
        logging.LogRecord(
            "email_sink.test", logging.ERROR, __file__, 0,
            "Test batch: error record (used for the subject)", None, None,
        ),
    ]


def send_test_batch(config: SinkConfig, to_override: str | None = None) -> DeliveryOutcome:
    """Deliver the sample batch with the configured sink.

    Args:
        config: Loaded settings.
        to_override: Recipient list replacing EMAIL_TO.

    Returns:
        Delivery outcome reported by the sink.
    """
    info = config.get_connection_settings()
    if to_override:
        info = ConnectionSettings.model_validate({**dict(info), "to_email": to_override})

    sink = EmailSink(
        info,
        body_formatter(config.EMAIL_OUTPUT_TEMPLATE),
        subject_formatter(config.EMAIL_SUBJECT),
    )
    return asyncio.run(sink.emit_batch(sample_batch()))


def main() -> int:
    """Main entry point.

    Returns:
        0 if the batch was delivered, 1 otherwise.
    """
    parser = argparse.ArgumentParser(
        description="Send a sample log batch through the email sink.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Deliver to EMAIL_TO
  python -m email_sink.scripts.send_test_batch

  # Deliver to another recipient list
  python -m email_sink.scripts.send_test_batch --to "a@example.com;b@example.com"
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output",
    )
    parser.add_argument(
        "--to",
        type=str,
        metavar="ADDRESSES",
        help="Recipients replacing EMAIL_TO (comma or semicolon delimited)",
    )
    parser.add_argument(
        "--no-header",
        action="store_true",
        help="Suppress header and footer output",
    )

    args = parser.parse_args()

    setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        console_level="DEBUG" if args.verbose else "INFO",
        enable_file=False,
    )

    if not args.no_header:
        print_header()

    exit_code = 0

    try:
        config = SinkConfig()
        print_config(config)

        outcome = send_test_batch(config, args.to)
        if outcome.delivered:
            print(f"\n✅ Batch delivered to {', '.join(outcome.recipients)}")
            print(f"   Subject: {outcome.subject}")
        else:
            print(f"\n❌ Batch not delivered: {outcome.error}")
            print("   Check SMTP_HOST, SMTP_PORT and credentials; run with --verbose for details.")
            exit_code = 1

    except Exception as e:
        print(f"\n❌ Test batch script error: {e}")
        logger.exception("Test batch script failed")
        exit_code = 1

    finally:
        if not args.no_header:
            print_footer()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
