"""FastAPI dependency injection functions.

Registry, notification channel and secret verifier are created once in the
application lifespan and stored on app.state; these helpers hand them to
route handlers.
"""
from typing import Optional
from fastapi import Depends, Header, Request

from calendar_admin.auth import SecretVerifier
from calendar_admin.notifications import NotificationChannel
from calendar_admin.registry import DateRegistry


def get_registry(request: Request) -> DateRegistry:
    """Get the process-wide date registry."""
    return request.app.state.registry


def get_notification_channel(request: Request) -> NotificationChannel:
    """Get the process-wide notification channel."""
    return request.app.state.notifications


def get_secret_verifier(request: Request) -> SecretVerifier:
    """Get the verifier built from API_SECRET."""
    return request.app.state.secret_verifier


async def verify_api_secret(
    x_api_secret: Optional[str] = Header(None, alias="X-API-Secret", description="Admin API secret"),
    verifier: SecretVerifier = Depends(get_secret_verifier),
) -> None:
    """
    FastAPI dependency for admin authentication.

    The secret is only read from the X-API-Secret header, never from the
    body or query string.

    Raises:
        InvalidAPISecretError: If the header is missing or wrong (mapped to 401)
    """
    verifier.verify(x_api_secret)
