"""Booking calendar admin: blocked-date registry, HTTP API and Telegram bot."""

__version__ = "1.0.0"
