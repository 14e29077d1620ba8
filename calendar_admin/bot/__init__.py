"""Telegram admin bot for the booking calendar."""
