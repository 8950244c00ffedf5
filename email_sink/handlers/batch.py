"""Logging handler that buffers records and mails them in batches.

Plugs an EmailSink into the standard logging tree. The handler only
decides when a batch is complete; rendering, delivery, and failure
reporting belong to the sink.

Usage:
    from email_sink.config import SinkConfig
    from email_sink.handlers import EmailBatchHandler

    handler = EmailBatchHandler.from_settings(SinkConfig())
    handler.setLevel(logging.ERROR)
    logging.getLogger().addHandler(handler)

Version: 1.0.0
"""

from __future__ import annotations

import asyncio
import logging
import logging.handlers
from typing import Any, Coroutine

from email_sink.config.settings import SinkConfig
from email_sink.core.logger import get_logger
from email_sink.core.selflog import selflog_write
from email_sink.models.outcome import DeliveryOutcome
from email_sink.sinks.base import BatchedSink
from email_sink.sinks.email import EmailSink
from email_sink.sinks.formatting import body_formatter, subject_formatter

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 100

_PACKAGE = "email_sink"


class ExcludeSinkRecords(logging.Filter):
    """Drop records emitted by this package's own loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not (record.name == _PACKAGE or record.name.startswith(_PACKAGE + "."))


class EmailBatchHandler(logging.handlers.BufferingHandler):
    """Buffers records and hands full batches to a BatchedSink.

    A batch is sent when the buffer reaches ``capacity`` or a record at or
    above ``flush_level`` arrives, and on close. Outside an event loop the
    delivery runs to completion inside ``flush``. Inside a running loop it
    is scheduled as a task that starts only after the previous one ends,
    so batches go out one at a time and in order. There, call
    ``await handler.aclose()`` (or ``await handler.drain()`` before
    ``close()``) so the final batch is not left pending.

    Attributes:
        sink: Receiver of completed batches.
        flush_level: Level that forces an immediate batch.
        last_outcome: Outcome of the most recent delivery.
        delivered_batches: Count of batches the relay accepted.
        failed_batches: Count of batches that could not be delivered.
    """

    def __init__(
        self,
        sink: BatchedSink,
        capacity: int = DEFAULT_BATCH_SIZE,
        flush_level: int = logging.CRITICAL,
    ) -> None:
        super().__init__(capacity)
        self.sink = sink
        self.flush_level = flush_level
        self.last_outcome: DeliveryOutcome | None = None
        self.delivered_batches = 0
        self.failed_batches = 0
        self._pending: set[asyncio.Task] = set()
        self._tail: asyncio.Task | None = None
        self.addFilter(ExcludeSinkRecords())

    @classmethod
    def from_settings(cls, settings: SinkConfig) -> EmailBatchHandler:
        """Build a handler and its EmailSink from loaded settings.

        Raises:
            EmailSinkConfigError: If addressing settings are missing or invalid.
        """
        sink = EmailSink(
            settings.get_connection_settings(),
            body_formatter(settings.EMAIL_OUTPUT_TEMPLATE),
            subject_formatter(settings.EMAIL_SUBJECT),
        )
        return cls(
            sink,
            capacity=settings.EMAIL_BATCH_SIZE,
            flush_level=settings.flush_level,
        )

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return len(self.buffer) >= self.capacity or record.levelno >= self.flush_level

    def flush(self) -> None:
        """Send everything buffered so far as one batch."""
        self.acquire()
        try:
            batch, self.buffer = self.buffer, []
            if batch:
                self._dispatch(self.sink.emit_batch(batch))
            else:
                self._dispatch(self.sink.on_empty_batch())
        finally:
            self.release()

    def _dispatch(self, coro: Coroutine[Any, Any, DeliveryOutcome | None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._record(asyncio.run(coro))
            return

        task = loop.create_task(self._run_after(self._tail, coro))
        self._tail = task
        self._pending.add(task)
        task.add_done_callback(self._task_done)

    @staticmethod
    async def _run_after(
        previous: asyncio.Task | None,
        coro: Coroutine[Any, Any, DeliveryOutcome | None],
    ) -> DeliveryOutcome | None:
        # one batch in flight: start only once the previous delivery finished
        try:
            if previous is not None and not previous.done():
                await asyncio.wait([previous])
        except BaseException:
            coro.close()
            raise
        return await coro

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if self._tail is task:
            self._tail = None
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            selflog_write("Batch delivery task failed: %s", error)
            return
        self._record(task.result())

    def _record(self, outcome: DeliveryOutcome | None) -> None:
        if outcome is None:
            return
        self.last_outcome = outcome
        if outcome.delivered:
            self.delivered_batches += 1
        else:
            self.failed_batches += 1
            logger.debug(f"Batch of {outcome.record_count} records not delivered: {outcome.error}")

    async def drain(self) -> None:
        """Wait for batches scheduled on the running event loop."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """Flush, wait for every scheduled batch, then close.

        Inside a running event loop use this instead of ``close``, which
        can only schedule the final batch.
        """
        self.flush()
        await self.drain()
        self.acquire()
        try:
            self.buffer.clear()
        finally:
            self.release()
        logging.Handler.close(self)
