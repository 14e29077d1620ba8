"""Telegram long-polling loop for the calendar admin bot.

Usage:
    python -m calendar_admin.bot.runner
"""
import time
from typing import Any, Dict, Optional

import requests

from calendar_admin.bot.api_client import CalendarAPIClient
from calendar_admin.bot.handlers import CalendarBot
from calendar_admin.bot.telegram import TelegramAPIError, TelegramClient
from calendar_admin.config import Settings, load_settings
from calendar_admin.logging_config import get_logger, setup_structured_logging
from calendar_admin.rate_limiter import RateLimiter

logger = get_logger(__name__)

# Pause after a failed getUpdates call before polling again
POLL_ERROR_PAUSE_SECONDS = 5


def build_bot(settings: Settings) -> CalendarBot:
    """Wire the bot with its API client and rate limiter."""
    api = CalendarAPIClient(
        base_url=settings.api_url,
        api_secret=settings.api_secret,
        timeout=settings.http_timeout_seconds,
    )
    limiter = RateLimiter(
        requests=settings.bot_rate_limit_requests,
        window_seconds=settings.bot_rate_limit_window_seconds,
    )
    return CalendarBot(api, rate_limiter=limiter)


def process_update(bot: CalendarBot, telegram: TelegramClient, update: Dict[str, Any]):
    """Handle one Telegram update and send the reply, if any."""
    message = update.get("message") or {}
    chat = message.get("chat") or {}
    sender = message.get("from") or {}
    if "id" not in chat:
        return

    user_id = sender.get("id", chat["id"])
    reply = bot.handle(user_id, message.get("text"))
    if reply is None:
        return

    telegram.send_message(
        chat["id"],
        reply.text,
        reply_markup=reply.reply_markup,
        parse_mode=reply.parse_mode,
    )


def run_polling(bot: CalendarBot, telegram: TelegramClient, max_cycles: Optional[int] = None):
    """
    Poll Telegram for updates and answer them one by one.

    Args:
        bot: Conversation handler
        telegram: Telegram API client
        max_cycles: Stop after this many getUpdates calls (None = forever)
    """
    offset = None
    cycles = 0

    while max_cycles is None or cycles < max_cycles:
        cycles += 1
        try:
            updates = telegram.get_updates(offset=offset)
        except (requests.exceptions.RequestException, TelegramAPIError) as e:
            logger.warning("telegram_poll_failed", error=str(e))
            time.sleep(POLL_ERROR_PAUSE_SECONDS)
            continue

        for update in updates:
            offset = update["update_id"] + 1
            try:
                process_update(bot, telegram, update)
            except (requests.exceptions.RequestException, TelegramAPIError) as e:
                logger.error("telegram_send_failed", update_id=update["update_id"], error=str(e))


def main():
    """Start the bot."""
    settings = load_settings()
    setup_structured_logging(settings.log_level)

    telegram = TelegramClient(settings.telegram_bot_token)
    bot = build_bot(settings)

    logger.info("bot_started", api_url=settings.api_url)
    try:
        run_polling(bot, telegram)
    except KeyboardInterrupt:
        logger.info("bot_stopped")


if __name__ == "__main__":
    main()
