"""Configuration module for the email log sink.

Loads and validates sink settings from environment variables or .env file.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from email_sink.config.settings import SinkConfig

__all__ = ["SinkConfig"]
