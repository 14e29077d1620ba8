"""Minimal Telegram Bot API client (long polling + sendMessage)."""
from typing import Any, Dict, List, Optional

import requests


class TelegramAPIError(RuntimeError):
    """Raised when Telegram answers with ok=false."""
    pass


class TelegramClient:
    def __init__(self, bot_token: str, timeout_seconds: float = 20.0,
                 session: Optional[requests.Session] = None):
        if not bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN is required")
        self.base_url = f"https://api.telegram.org/bot{bot_token}"
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def _call(self, method: str, payload: Dict[str, Any], timeout: float) -> Any:
        r = self.session.post(f"{self.base_url}/{method}", json=payload, timeout=timeout)
        r.raise_for_status()
        data = r.json()
        if not data.get("ok", False):
            raise TelegramAPIError(f"Telegram API error: {data.get('description', data)}")
        return data.get("result")

    def get_updates(self, offset: Optional[int] = None, poll_timeout: int = 30) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {"timeout": poll_timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset
        # HTTP timeout must outlast the long poll
        return self._call("getUpdates", payload, timeout=poll_timeout + self.timeout_seconds) or []

    def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: Optional[Dict[str, Any]] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        payload: Dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        self._call("sendMessage", payload, timeout=self.timeout_seconds)
