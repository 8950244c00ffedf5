"""Operational scripts for the email log sink."""
