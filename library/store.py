"""JSON file backed store for the personal game library."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Mapping

from library.models import (
    DEFAULT_BUY_LINK,
    GameRecord,
    ValidationError,
    coerce_hours,
    coerce_price,
    coerce_record_id,
    now_utc_iso,
)

__all__ = ["LibraryStore", "NotFoundError", "ValidationError"]


class NotFoundError(LookupError):
    """Raised when no library record has the requested id."""

    def __init__(self, game_id: Any) -> None:
        super().__init__(f"Game not found: {game_id}")
        self.game_id = game_id


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


class LibraryStore:
    """In-memory list of :class:`GameRecord` mirrored to a JSON document.

    The document is read once at construction. Every mutation rewrites the
    whole document before returning; a failed write is logged and the
    in-memory change is kept. Entries that cannot be read as records are
    left out of the collection but written back unchanged.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        now: Callable[[], str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._path = Path(path)
        self._now = now or now_utc_iso
        self._logger = logger or logging.getLogger(__name__)
        self._lock = Lock()
        self._games: list[GameRecord] = []
        self._unreadable: list[Any] = []
        self._held_ids: set[int] = set()
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def list(self) -> list[GameRecord]:
        with self._lock:
            return list(self._games)

    def get(self, game_id: Any) -> GameRecord:
        numeric_id = coerce_record_id(game_id)
        with self._lock:
            return self._games[self._index_of(numeric_id)]

    def add(
        self,
        title: Any = None,
        genre: Any = None,
        hours_played: Any = None,
        price: Any = None,
        buy_link: Any = None,
    ) -> GameRecord:
        missing = [
            name
            for name, value in (("title", title), ("genre", genre), ("price", price))
            if _is_missing(value)
        ]
        if missing:
            raise ValidationError(
                "Missing required fields: title, genre, price"
            )
        if not isinstance(title, str) or not isinstance(genre, str):
            raise ValidationError("title and genre must be text")

        hours = coerce_hours(hours_played) if hours_played else 0
        numeric_price = coerce_price(price)
        link = buy_link if isinstance(buy_link, str) and buy_link.strip() else DEFAULT_BUY_LINK

        with self._lock:
            record = GameRecord(
                id=self._next_id(),
                title=title.strip(),
                genre=genre.strip(),
                price=numeric_price,
                hours_played=hours,
                buy_link=link,
                date_added=self._now(),
            )
            self._games.append(record)
            self._save()
        self._logger.info("Added game %s (%s)", record.id, record.title)
        return record

    def remove(self, game_id: Any) -> GameRecord:
        numeric_id = coerce_record_id(game_id)
        with self._lock:
            record = self._games.pop(self._index_of(numeric_id))
            self._save()
        self._logger.info("Removed game %s (%s)", record.id, record.title)
        return record

    def update_hours(self, game_id: Any, hours_played: Any) -> GameRecord:
        if hours_played is None:
            raise ValidationError("Missing required field: hoursPlayed")
        hours = coerce_hours(hours_played)
        numeric_id = coerce_record_id(game_id)
        with self._lock:
            record = self._games[self._index_of(numeric_id)]
            record.hours_played = hours
            self._save()
        self._logger.info("Updated hours for game %s to %s", record.id, hours)
        return record

    def reload(self) -> None:
        with self._lock:
            self._load()

    def _next_id(self) -> int:
        taken = {record.id for record in self._games} | self._held_ids
        if not taken:
            return 1
        return max(taken) + 1

    def _index_of(self, game_id: int) -> int:
        for index, record in enumerate(self._games):
            if record.id == game_id:
                return index
        raise NotFoundError(game_id)

    def _load(self) -> None:
        self._games = []
        self._unreadable = []
        self._held_ids = set()
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            self._logger.info("Library file %s not found; starting empty", self._path)
            return
        except (OSError, ValueError) as exc:
            self._logger.warning("Could not load %s: %s", self._path, exc)
            return

        if not isinstance(data, list):
            self._logger.warning(
                "Library file %s does not hold a list; starting empty", self._path
            )
            return

        seen: set[int] = set()
        for entry in data:
            if not isinstance(entry, Mapping):
                self._logger.warning("Keeping malformed library entry %r as is", entry)
                self._unreadable.append(entry)
                continue
            try:
                record = GameRecord.from_dict(entry)
            except (TypeError, ValueError) as exc:
                self._logger.warning(
                    "Keeping unreadable library entry %r as is: %s", entry, exc
                )
                self._unreadable.append(entry)
                continue
            if record.id in seen:
                self._logger.warning("Keeping duplicate library id %s as is", record.id)
                self._unreadable.append(entry)
                self._held_ids.add(record.id)
                continue
            seen.add(record.id)
            self._games.append(record)
        self._logger.debug("Loaded %s games from %s", len(self._games), self._path)

    def _save(self) -> None:
        payload: list[Any] = [record.to_dict() for record in self._games]
        # entries that could not be loaded go back out untouched
        payload.extend(self._unreadable)
        tmp_path: str | None = None
        try:
            directory = self._path.parent
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as exc:
            self._logger.error("Failed to save library to %s: %s", self._path, exc)
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
