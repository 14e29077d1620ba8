"""Tests for the Telegram polling loop and client."""
from unittest.mock import Mock, patch

import pytest
import requests
from calendar_admin.bot import messages
from calendar_admin.bot.handlers import BotReply, CalendarBot
from calendar_admin.bot.runner import build_bot, process_update, run_polling
from calendar_admin.bot.telegram import TelegramAPIError, TelegramClient
from calendar_admin.config import Settings


def _update(update_id: int, text: str, user_id: int = 7, chat_id: int = 70) -> dict:
    return {
        "update_id": update_id,
        "message": {"chat": {"id": chat_id}, "from": {"id": user_id}, "text": text},
    }


def test_process_update_sends_reply_to_chat():
    bot = Mock(spec=CalendarBot)
    bot.handle.return_value = BotReply("hi", parse_mode="HTML")
    telegram = Mock(spec=TelegramClient)

    process_update(bot, telegram, _update(1, "/start"))

    bot.handle.assert_called_once_with(7, "/start")
    telegram.send_message.assert_called_once_with(70, "hi", reply_markup=None, parse_mode="HTML")


def test_process_update_ignores_updates_without_chat():
    bot = Mock(spec=CalendarBot)
    telegram = Mock(spec=TelegramClient)

    process_update(bot, telegram, {"update_id": 1, "edited_message": {}})

    bot.handle.assert_not_called()
    telegram.send_message.assert_not_called()


def test_run_polling_advances_offset():
    bot = Mock(spec=CalendarBot)
    bot.handle.return_value = BotReply("ok")
    telegram = Mock(spec=TelegramClient)
    telegram.get_updates.side_effect = [[_update(10, "a"), _update(11, "b")], []]

    run_polling(bot, telegram, max_cycles=2)

    assert telegram.get_updates.call_args_list[0].kwargs == {"offset": None}
    assert telegram.get_updates.call_args_list[1].kwargs == {"offset": 12}
    assert telegram.send_message.call_count == 2


def test_run_polling_survives_send_failure():
    bot = Mock(spec=CalendarBot)
    bot.handle.return_value = BotReply("ok")
    telegram = Mock(spec=TelegramClient)
    telegram.get_updates.side_effect = [[_update(10, "a"), _update(11, "b")]]
    telegram.send_message.side_effect = [requests.exceptions.ConnectionError("down"), None]

    run_polling(bot, telegram, max_cycles=1)

    assert telegram.send_message.call_count == 2


def test_run_polling_pauses_after_poll_failure():
    bot = Mock(spec=CalendarBot)
    telegram = Mock(spec=TelegramClient)
    telegram.get_updates.side_effect = [TelegramAPIError("Unauthorized"), []]

    with patch("calendar_admin.bot.runner.time.sleep") as mock_sleep:
        run_polling(bot, telegram, max_cycles=2)

    mock_sleep.assert_called_once()
    assert telegram.get_updates.call_count == 2


def test_build_bot_uses_configured_limits():
    settings = Settings(api_secret="s", api_url="http://api.test", bot_rate_limit_requests=2)

    bot = build_bot(settings)

    assert bot.api.base_url == "http://api.test"
    assert bot.rate_limiter.max_requests == 2
    assert bot.rate_limiter.window_seconds == 60


def test_end_to_end_block_through_runner():
    """Two updates: menu command then date, answered via Telegram."""
    api = Mock()
    api.block_date.return_value = ["15-03-2025"]
    bot = CalendarBot(api)
    telegram = Mock(spec=TelegramClient)
    telegram.get_updates.side_effect = [[_update(1, messages.BUTTON_BLOCK), _update(2, "15-03-2025")]]

    run_polling(bot, telegram, max_cycles=1)

    api.block_date.assert_called_once_with("15-03-2025")
    texts = [c.args[1] for c in telegram.send_message.call_args_list]
    assert texts[0] == messages.ASK_DATE
    assert "15-03-2025" in texts[1]


class TestTelegramClient:
    """Telegram Bot API wrapper."""

    def _ok(self, result):
        response = Mock()
        response.json.return_value = {"ok": True, "result": result}
        return response

    def test_requires_token(self):
        with pytest.raises(ValueError):
            TelegramClient("")

    def test_send_message_payload(self):
        session = Mock()
        session.post.return_value = self._ok({})
        client = TelegramClient("123:abc", session=session)

        client.send_message(70, "hello", reply_markup=messages.MAIN_KEYBOARD, parse_mode="HTML")

        url = session.post.call_args.args[0]
        payload = session.post.call_args.kwargs["json"]
        assert url == "https://api.telegram.org/bot123:abc/sendMessage"
        assert payload["chat_id"] == 70
        assert payload["text"] == "hello"
        assert payload["parse_mode"] == "HTML"
        assert payload["reply_markup"] == messages.MAIN_KEYBOARD

    def test_get_updates_passes_offset(self):
        session = Mock()
        session.post.return_value = self._ok([{"update_id": 5}])
        client = TelegramClient("123:abc", session=session)

        assert client.get_updates(offset=5, poll_timeout=10) == [{"update_id": 5}]
        assert session.post.call_args.kwargs["json"]["offset"] == 5
        assert session.post.call_args.kwargs["timeout"] > 10

    def test_not_ok_raises(self):
        session = Mock()
        response = Mock()
        response.json.return_value = {"ok": False, "description": "Unauthorized"}
        session.post.return_value = response
        client = TelegramClient("123:abc", session=session)

        with pytest.raises(TelegramAPIError):
            client.send_message(70, "hello")
