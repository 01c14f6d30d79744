"""IGDB client and external API integration helpers."""

from __future__ import annotations

import logging
import numbers
from typing import Any, Callable
from urllib.request import Request, urlopen

from igdb.token import AuthError, TokenCache
from igdb.transport import request_json

logger = logging.getLogger(__name__)


__all__ = [
    "AuthError",
    "DEFAULT_QUERY",
    "FetchError",
    "GAME_FIELDS",
    "IGDBClient",
    "build_genre_query",
    "build_search_query",
    "build_trending_query",
]


GAME_FIELDS = "fields name, rating, genres, platforms, release_dates;"

DEFAULT_QUERY = f"{GAME_FIELDS} limit 10;"

TRENDING_MIN_RATING = 80
TRENDING_LIMIT = 20
SEARCH_LIMIT = 10
GENRE_LIMIT = 15


class FetchError(RuntimeError):
    """Raised when a catalog query cannot be completed."""


def _quote_search_text(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_trending_query() -> str:
    return (
        f"{GAME_FIELDS} "
        f"where rating > {TRENDING_MIN_RATING}; "
        "sort rating desc; "
        f"limit {TRENDING_LIMIT};"
    )


def build_search_query(name: str) -> str:
    return f'{GAME_FIELDS} search "{_quote_search_text(name)}"; limit {SEARCH_LIMIT};'


def build_genre_query(genre_id: int) -> str:
    if isinstance(genre_id, bool) or not isinstance(genre_id, numbers.Integral):
        raise TypeError(f"genre id must be an integer, got {genre_id!r}")
    return (
        f"{GAME_FIELDS} "
        f"where genres = [{int(genre_id)}]; "
        "sort rating desc; "
        f"limit {GENRE_LIMIT};"
    )


class IGDBClient:
    """Issue Apicalypse queries against the IGDB ``games`` endpoint.

    Tokens come from the shared :class:`~igdb.token.TokenCache`; payloads are
    returned exactly as IGDB sends them.
    """

    BASE_URL = "https://api.igdb.com/v4"

    def __init__(
        self,
        token_cache: TokenCache,
        *,
        timeout: float | None = None,
        request_factory: Callable[..., Any] | None = None,
        opener: Callable[..., Any] | None = None,
    ) -> None:
        self._token_cache = token_cache
        self._timeout = timeout
        self._request_factory = request_factory or Request
        self._opener = opener or urlopen

    @property
    def token_cache(self) -> TokenCache:
        return self._token_cache

    def fetch_games(self, query: str = DEFAULT_QUERY) -> list[Any]:
        """POST ``query`` to ``/games`` and return the decoded list."""

        token = self._token_cache.get_token()

        request = self._request_factory(
            f"{self.BASE_URL}/games",
            data=query.encode("utf-8"),
            method="POST",
        )
        self._apply_headers(request, self._token_cache.client_id, token)

        try:
            payload = request_json(
                request,
                self._opener,
                timeout=self._timeout,
                error_cls=FetchError,
                error_prefix="IGDB request failed",
                generic_error="failed to fetch games from IGDB",
            )
        except FetchError:
            logger.exception("Error fetching from IGDB")
            raise

        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.error("Unexpected IGDB payload type %s", type(payload).__name__)
            raise FetchError("unexpected IGDB response: expected a list of games")
        return payload

    def get_trending_games(self) -> list[Any]:
        return self.fetch_games(build_trending_query())

    def search_games_by_name(self, name: str) -> list[Any]:
        return self.fetch_games(build_search_query(name))

    def get_games_by_genre(self, genre_id: int) -> list[Any]:
        return self.fetch_games(build_genre_query(genre_id))

    @staticmethod
    def _apply_headers(request: Any, client_id: str, access_token: str) -> None:
        request.add_header("Client-ID", client_id)
        request.add_header("Authorization", f"Bearer {access_token}")
        request.add_header("Content-Type", "text/plain")
        request.add_header("Accept", "application/json")
