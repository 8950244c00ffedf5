"""Delivery outcome model.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DeliveryOutcome(BaseModel):
    """Result of one batch delivery attempt.

    Returned to the batching host in place of an exception, so the host can
    count failures without reading the self-diagnostics channel.

    Attributes:
        delivered: True if the relay accepted the message.
        record_count: Number of records in the batch.
        recipients: Addresses the message was sent (or meant to be sent) to.
        subject: Rendered subject line, if rendering got that far.
        error: Failure detail when not delivered.
        is_transient: Whether the failure looks temporary.
    """

    model_config = ConfigDict(frozen=True)

    delivered: bool = Field(..., description="Relay accepted the message")
    record_count: int = Field(default=0, ge=0, description="Records in the batch")
    recipients: tuple[str, ...] = Field(default=(), description="Recipient addresses")
    subject: str | None = Field(default=None, description="Rendered subject")
    error: str | None = Field(default=None, description="Failure detail")
    is_transient: bool = Field(default=False, description="Failure looks temporary")
