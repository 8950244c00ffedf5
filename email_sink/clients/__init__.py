"""Clients module for the email log sink.

Contains the SMTP transport integration.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from email_sink.clients.transport import (
    create_client,
    is_transient_error,
    open_connected_client,
)

__all__ = ["create_client", "is_transient_error", "open_connected_client"]
