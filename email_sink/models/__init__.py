"""Models module for the email log sink.

Defines Pydantic v2 models for relay configuration and delivery outcomes.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from email_sink.models.connection import DEFAULT_PORT, ConnectionSettings
from email_sink.models.outcome import DeliveryOutcome

__all__ = [
    "DEFAULT_PORT",
    "ConnectionSettings",
    "DeliveryOutcome",
]
