"""Twitch bearer token cache used to authenticate IGDB requests."""

from __future__ import annotations

import logging
import numbers
import time
from threading import Lock
from typing import Any, Callable, Mapping
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from igdb.transport import request_json

logger = logging.getLogger(__name__)

__all__ = ["AuthError", "TokenCache"]


class AuthError(RuntimeError):
    """Raised when the Twitch credential exchange fails."""


class TokenCache:
    """Hold a single Twitch access token and refresh it once it expires.

    The token is only reused while the clock reads strictly before the
    recorded expiry. Any other state triggers exactly one credential exchange
    against :attr:`TOKEN_URL`; failures surface as :class:`AuthError` and are
    never retried.
    """

    TOKEN_URL = "https://id.twitch.tv/oauth2/token"

    def __init__(
        self,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        timeout: float | None = None,
        clock: Callable[[], float] | None = None,
        request_factory: Callable[..., Any] | None = None,
        opener: Callable[..., Any] | None = None,
    ) -> None:
        self._client_id = (client_id or "").strip()
        self._client_secret = (client_secret or "").strip()
        self._timeout = timeout
        self._clock = clock or time.time
        self._request_factory = request_factory or Request
        self._opener = opener or urlopen
        self._lock = Lock()
        self._access_token: str | None = None
        self._expires_at: float | None = None

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def expires_at(self) -> float | None:
        return self._expires_at

    def get_token(self) -> str:
        """Return a valid access token, exchanging credentials when needed."""

        with self._lock:
            now = self._clock()
            if (
                self._access_token
                and self._expires_at is not None
                and now < self._expires_at
            ):
                return self._access_token

            token, ttl = self._exchange_credentials()
            self._access_token = token
            self._expires_at = now + ttl
            logger.info("IGDB token obtained; valid for %s seconds", ttl)
            return token

    def invalidate(self) -> None:
        with self._lock:
            self._access_token = None
            self._expires_at = None

    def _exchange_credentials(self) -> tuple[str, float]:
        if not self._client_id or not self._client_secret:
            raise AuthError("missing twitch client credentials")

        query = urlencode(
            {
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "grant_type": "client_credentials",
            }
        )
        request = self._request_factory(
            f"{self.TOKEN_URL}?{query}",
            data=b"",
            method="POST",
        )
        request.add_header("Accept", "application/json")

        try:
            data = request_json(
                request,
                self._opener,
                timeout=self._timeout,
                error_cls=AuthError,
                error_prefix="failed to obtain twitch token",
                generic_error="failed to obtain twitch token",
            )
        except AuthError:
            logger.exception("Error getting IGDB access token")
            raise

        if not isinstance(data, Mapping):
            raise AuthError("malformed twitch token response")
        token = data.get("access_token")
        if not isinstance(token, str) or not token.strip():
            raise AuthError("missing access token in twitch response")
        ttl = data.get("expires_in")
        if isinstance(ttl, bool) or not isinstance(ttl, numbers.Real):
            raise AuthError("missing expires_in in twitch response")
        return token.strip(), float(ttl)
