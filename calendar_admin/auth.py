"""Shared-secret authentication for admin endpoints."""
import hmac
from typing import Optional


class InvalidAPISecretError(Exception):
    """Raised when the supplied API secret is missing or wrong."""
    pass


class SecretVerifier:
    """
    Verifies the X-API-Secret header against the configured secret.

    Comparison goes through hmac.compare_digest so timing does not reveal
    how much of the secret matched. An empty configured secret rejects
    everything.
    """

    def __init__(self, secret: str):
        self._secret = (secret or "").encode()

    @property
    def is_configured(self) -> bool:
        return bool(self._secret)

    def verify(self, supplied: Optional[str]):
        """
        Check supplied secret.

        Raises:
            InvalidAPISecretError: If the secret is missing or does not match
        """
        if not self._secret or not supplied:
            raise InvalidAPISecretError("Invalid API secret")

        if not hmac.compare_digest(supplied.encode(), self._secret):
            raise InvalidAPISecretError("Invalid API secret")
