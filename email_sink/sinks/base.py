"""BatchedSink protocol: the contract between a batching host and a sink."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, runtime_checkable

from email_sink.models.outcome import DeliveryOutcome


@runtime_checkable
class BatchedSink(Protocol):
    """Receives finished batches from a host that owns timing and buffering.

    ``emit_batch`` never raises for delivery failures; it reports them in
    the returned outcome. ``on_empty_batch`` is called when a flush finds
    nothing pending and must not perform I/O.
    """

    async def emit_batch(
        self, records: Iterable[logging.LogRecord] | None
    ) -> DeliveryOutcome: ...

    async def on_empty_batch(self) -> None: ...
