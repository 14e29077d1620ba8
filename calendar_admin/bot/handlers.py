"""Telegram bot conversation logic.

CalendarBot turns one incoming text into one reply. It has no Telegram I/O
of its own, so the runner (or a test) decides how replies are delivered.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from calendar_admin.bot import messages
from calendar_admin.bot.api_client import (
    BackendError,
    BackendRejectedError,
    BackendUnavailableError,
    CalendarAPIClient,
)
from calendar_admin.bot.state import PendingAction, PendingActionStore
from calendar_admin.date_validator import is_valid_date
from calendar_admin.logging_config import get_logger
from calendar_admin.rate_limiter import RateLimiter, RateLimitExceeded

logger = get_logger(__name__)


@dataclass
class BotReply:
    """Message to send back to the user."""
    text: str
    reply_markup: Optional[Dict[str, Any]] = None
    parse_mode: Optional[str] = None


def format_dates(dates: List[str]) -> str:
    """Numbered HTML list of blocked dates."""
    if not dates:
        return messages.NO_DATES

    lines = [f"{index}. {value}" for index, value in enumerate(dates, start=1)]
    return messages.DATES_HEADER + "\n".join(lines) + "\n" + messages.DATES_TOTAL.format(total=len(dates))


def describe_backend_error(error: BackendError) -> str:
    """Map an API failure to the text shown to the user."""
    if isinstance(error, BackendUnavailableError):
        return messages.UNAVAILABLE
    if isinstance(error, BackendRejectedError):
        if error.status_code == 401:
            return messages.UNAUTHORIZED
        if error.status_code >= 500:
            return messages.SERVER_ERROR
        return messages.REJECTED.format(message=error.message)
    return messages.SERVER_ERROR


class CalendarBot:
    """
    Menu-driven admin bot.

    Flow:
    - /start shows the menu keyboard
    - "View calendar" lists blocked dates
    - "Block date" / "Unblock date" arm a pending action; the next text
      message is taken as the date
    - /cancel drops a pending action

    Every action except /start and /cancel counts against the user's rate
    limit; a throttled action never reaches the API.
    """

    def __init__(
        self,
        api: CalendarAPIClient,
        sessions: Optional[PendingActionStore] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.api = api
        self.sessions = sessions or PendingActionStore()
        self.rate_limiter = rate_limiter or RateLimiter(requests=5, window_seconds=60)

        self._commands: Dict[str, Callable[[int], BotReply]] = {
            messages.BUTTON_VIEW: self._view_calendar,
            messages.BUTTON_BLOCK: lambda user_id: self._arm(user_id, PendingAction.AWAITING_BLOCK_INPUT),
            messages.BUTTON_UNBLOCK: lambda user_id: self._arm(user_id, PendingAction.AWAITING_UNBLOCK_INPUT),
        }

    def handle(self, user_id: int, text: Optional[str]) -> Optional[BotReply]:
        """
        Process one incoming message.

        Returns:
            Reply to send, or None for non-text messages
        """
        if text is None:
            return None
        text = text.strip()

        if text.startswith("/start"):
            self.sessions.clear(user_id)
            return BotReply(messages.WELCOME, reply_markup=messages.MAIN_KEYBOARD)

        if text.startswith("/cancel"):
            if self.sessions.consume(user_id) is PendingAction.IDLE:
                return BotReply(messages.NOTHING_TO_CANCEL)
            return BotReply(messages.CANCELLED)

        try:
            self.rate_limiter.check_rate_limit(str(user_id))
        except RateLimitExceeded as e:
            logger.info("bot_action_throttled", user_id=user_id, retry_after=e.retry_after)
            return BotReply(messages.THROTTLED.format(retry_after=e.retry_after))

        command = self._commands.get(text)
        if command is not None:
            return command(user_id)

        pending = self.sessions.consume(user_id)
        if pending is PendingAction.AWAITING_BLOCK_INPUT:
            return self._submit(user_id, text, block=True)
        if pending is PendingAction.AWAITING_UNBLOCK_INPUT:
            return self._submit(user_id, text, block=False)

        return BotReply(messages.UNKNOWN_COMMAND)

    def _arm(self, user_id: int, action: PendingAction) -> BotReply:
        self.sessions.begin(user_id, action)
        return BotReply(messages.ASK_DATE)

    def _view_calendar(self, user_id: int) -> BotReply:
        try:
            dates = self.api.list_dates()
        except BackendError as e:
            return BotReply(describe_backend_error(e))
        return BotReply(format_dates(dates), parse_mode="HTML")

    def _submit(self, user_id: int, value: str, block: bool) -> BotReply:
        if not is_valid_date(value):
            return BotReply(messages.INVALID_FORMAT)

        try:
            if block:
                self.api.block_date(value)
            else:
                self.api.unblock_date(value)
        except BackendError as e:
            logger.info("bot_action_failed", user_id=user_id, date=value, block=block, error=str(e))
            return BotReply(describe_backend_error(e))

        logger.info("bot_action_applied", user_id=user_id, date=value, block=block)
        template = messages.BLOCKED if block else messages.UNBLOCKED
        return BotReply(template.format(date=value), parse_mode="HTML")
