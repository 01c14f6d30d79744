"""Shared testing helpers for building the Flask app without live IGDB calls."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any
from urllib.error import HTTPError

from flask import Flask

from library.store import LibraryStore
from web.app_factory import create_app

FIXED_NOW = "2024-01-01T00:00:00.000Z"


class FakeResponse:
    """Minimal stand-in for the object returned by ``urlopen``."""

    def __init__(self, body: Any) -> None:
        if isinstance(body, bytes):
            self._body = body
        else:
            self._body = json.dumps(body).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


class FakeOpener:
    """Callable replacing ``urlopen``; replays queued results in order."""

    def __init__(self, *results: Any) -> None:
        self._results = list(results)
        self.requests: list[Any] = []
        self.timeouts: list[Any] = []

    def queue(self, *results: Any) -> None:
        self._results.extend(results)

    def __call__(self, request: Any, timeout: Any = None) -> FakeResponse:
        self.requests.append(request)
        self.timeouts.append(timeout)
        if not self._results:
            raise AssertionError(f"unexpected request to {request.full_url}")
        result = self._results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return FakeResponse(result)


def http_error(url: str, code: int, body: bytes = b"") -> HTTPError:
    return HTTPError(url, code, "error", {}, io.BytesIO(body))


class FakeIGDBClient:
    """Records catalog calls and returns canned payloads."""

    def __init__(self, games: list[Any] | None = None, error: Exception | None = None) -> None:
        self.games = games if games is not None else []
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    def _respond(self, name: str, arg: Any = None) -> list[Any]:
        self.calls.append((name, arg))
        if self.error is not None:
            raise self.error
        return self.games

    def fetch_games(self, query: str = "") -> list[Any]:
        return self._respond("fetch_games", query)

    def get_trending_games(self) -> list[Any]:
        return self._respond("trending")

    def search_games_by_name(self, name: str) -> list[Any]:
        return self._respond("search", name)

    def get_games_by_genre(self, genre_id: int) -> list[Any]:
        return self._respond("genre", genre_id)


def build_store(tmp_path: Path, *, now: str = FIXED_NOW) -> LibraryStore:
    return LibraryStore(tmp_path / "games.json", now=lambda: now)


def build_app(
    tmp_path: Path,
    *,
    store: LibraryStore | None = None,
    igdb_client: Any = None,
) -> Flask:
    """Return a testing Flask app backed by a library file under ``tmp_path``."""

    flask_app = create_app(
        store=store or build_store(tmp_path),
        igdb_client=igdb_client or FakeIGDBClient(),
    )
    flask_app.config['TESTING'] = True
    flask_app.testing = True
    return flask_app


__all__ = [
    "FIXED_NOW",
    "FakeIGDBClient",
    "FakeOpener",
    "FakeResponse",
    "build_app",
    "build_store",
    "http_error",
]
