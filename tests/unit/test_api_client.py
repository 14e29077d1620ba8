"""Tests for the bot's calendar API client."""
from unittest.mock import Mock, patch

import pytest
import requests
from calendar_admin.bot.api_client import (
    BackendRejectedError,
    BackendUnavailableError,
    CalendarAPIClient,
)


def _response(status_code: int, payload=None):
    response = Mock()
    response.status_code = status_code
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return CalendarAPIClient("http://calendar.test/", api_secret="s3cret", timeout=5)


def test_list_dates(client):
    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _response(200, {"success": True, "dates": ["15-03-2025"], "total": 1})

        assert client.list_dates() == ["15-03-2025"]

        args, kwargs = mock_request.call_args
        assert args == ("GET", "http://calendar.test/api/booked-dates")
        assert kwargs["timeout"] == 5
        assert "X-API-Secret" not in kwargs["headers"]


def test_block_date_sends_secret_in_header_only(client):
    """Secret goes in X-API-Secret, never in the body."""
    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _response(200, {"success": True, "dates": ["15-03-2025"]})

        assert client.block_date("15-03-2025") == ["15-03-2025"]

        args, kwargs = mock_request.call_args
        assert args == ("POST", "http://calendar.test/api/admin/block-date")
        assert kwargs["headers"] == {"X-API-Secret": "s3cret"}
        assert kwargs["json"] == {"date": "15-03-2025"}


def test_unblock_date_uses_delete(client):
    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _response(200, {"success": True, "dates": []})

        assert client.unblock_date("15-03-2025") == []

        args, kwargs = mock_request.call_args
        assert args == ("DELETE", "http://calendar.test/api/admin/unblock-date")
        assert kwargs["json"] == {"date": "15-03-2025"}


def test_error_status_raises_rejected_with_server_message(client):
    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _response(400, {"success": False, "message": "Date 15-03-2025 is already blocked"})

        with pytest.raises(BackendRejectedError) as exc_info:
            client.block_date("15-03-2025")

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Date 15-03-2025 is already blocked"


def test_error_without_json_body(client):
    with patch("requests.Session.request") as mock_request:
        mock_request.return_value = _response(502)

        with pytest.raises(BackendRejectedError) as exc_info:
            client.list_dates()

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "HTTP 502"


@pytest.mark.parametrize("error", [
    requests.exceptions.ConnectionError("Connection refused"),
    requests.exceptions.Timeout("Request timeout"),
])
def test_network_failure_raises_unavailable_without_retry(client, error):
    """Failures are reported once; nothing is retried."""
    with patch("requests.Session.request") as mock_request:
        mock_request.side_effect = error

        with pytest.raises(BackendUnavailableError):
            client.list_dates()

        assert mock_request.call_count == 1
