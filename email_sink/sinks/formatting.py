"""Record formatters for message bodies and subject lines.

Any object with ``format(record) -> str`` works as a formatter, which
includes every ``logging.Formatter``.

Version: 1.0.0
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

DEFAULT_OUTPUT_TEMPLATE = "%(asctime)s [%(levelname)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_SUBJECT = "Log Messages"


@runtime_checkable
class TextFormatter(Protocol):
    """Renders one log record to text."""

    def format(self, record: logging.LogRecord) -> str: ...


class BodyFormatter(logging.Formatter):
    """Formatter that terminates every rendered record with a newline.

    Batch bodies are plain concatenations, so the line break has to come
    from the formatter.
    """

    def format(self, record: logging.LogRecord) -> str:
        return super().format(record) + "\n"


class FixedTextFormatter(logging.Formatter):
    """Formatter that ignores the record and always renders the same text."""

    def __init__(self, text: str) -> None:
        super().__init__()
        self.text = text

    def format(self, record: logging.LogRecord) -> str:
        return self.text


def body_formatter(
    template: str = DEFAULT_OUTPUT_TEMPLATE,
    datefmt: str | None = DEFAULT_DATE_FORMAT,
) -> BodyFormatter:
    """Build the body formatter for a %-style output template."""
    return BodyFormatter(template, datefmt=datefmt)


def subject_formatter(template: str = DEFAULT_SUBJECT) -> logging.Formatter:
    """Build the subject formatter.

    A template with %-style record fields renders per record; anything
    else is used verbatim.

    Args:
        template: "Log Messages" or e.g. "[%(levelname)s] %(message)s".

    Returns:
        Formatter for the subject line.
    """
    if "%(" in template:
        return logging.Formatter(template, datefmt=DEFAULT_DATE_FORMAT)
    return FixedTextFormatter(template)
