"""Library record model and boundary coercion helpers."""

from __future__ import annotations

import logging
import math
import numbers
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

__all__ = [
    "DEFAULT_BUY_LINK",
    "GameRecord",
    "ValidationError",
    "coerce_hours",
    "coerce_price",
    "coerce_record_id",
    "now_utc_iso",
    "parse_stored_hours",
]

DEFAULT_BUY_LINK = "#"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when a library write carries a missing or invalid field."""


def now_utc_iso() -> str:
    """Return the current UTC instant as an ISO-8601 string with a ``Z`` suffix."""

    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def coerce_record_id(value: Any) -> int:
    """Return ``value`` as a positive integer id or raise :class:`ValidationError`."""

    if isinstance(value, bool):
        raise ValidationError(f"invalid game id: {value!r}")
    if isinstance(value, numbers.Integral):
        numeric = int(value)
    else:
        text = str(value).strip() if value is not None else ""
        try:
            numeric = int(text)
        except ValueError as exc:
            raise ValidationError(f"invalid game id: {value!r}") from exc
    if numeric <= 0:
        raise ValidationError(f"invalid game id: {value!r}")
    return numeric


def coerce_hours(value: Any) -> int:
    """Return ``value`` as a non-negative whole number of hours."""

    if isinstance(value, bool):
        raise ValidationError("hoursPlayed must be a non-negative integer")
    if isinstance(value, numbers.Integral):
        hours = int(value)
    elif isinstance(value, numbers.Real):
        if not float(value).is_integer():
            raise ValidationError("hoursPlayed must be a non-negative integer")
        hours = int(value)
    else:
        text = str(value).strip() if value is not None else ""
        try:
            hours = int(text)
        except ValueError as exc:
            raise ValidationError("hoursPlayed must be a non-negative integer") from exc
    if hours < 0:
        raise ValidationError("hoursPlayed must be a non-negative integer")
    return hours


def coerce_price(value: Any) -> int | float:
    """Return ``value`` as a number, accepting numeric strings."""

    if isinstance(value, bool):
        raise ValidationError("price must be a number")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        numeric = float(value)
    else:
        text = str(value).strip() if value is not None else ""
        try:
            numeric = float(text)
        except ValueError as exc:
            raise ValidationError("price must be a number") from exc
    if numeric != numeric or numeric in (float("inf"), float("-inf")):
        raise ValidationError("price must be a finite number")
    return numeric


def parse_stored_hours(value: Any) -> int | None:
    """Read ``hoursPlayed`` from a stored entry without rejecting it.

    Files written by earlier versions may hold fractional numbers or text
    such as ``"5.5"``. Numbers are truncated and strings are read up to their
    first non-digit. Returns ``None`` when no non-negative whole number can
    be recovered.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        numeric = float(value)
        if not math.isfinite(numeric):
            return None
        hours = int(numeric)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        hours = int(match.group(1))
    else:
        return None
    return hours if hours >= 0 else None


@dataclass
class GameRecord:
    """One owned game in the library."""

    id: int
    title: str
    genre: str
    price: int | float
    hours_played: int = 0
    buy_link: str = DEFAULT_BUY_LINK
    date_added: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "genre": self.genre,
            "hoursPlayed": self.hours_played,
            "price": self.price,
            "buyLink": self.buy_link,
            "dateAdded": self.date_added,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameRecord":
        """Build a record from its stored JSON shape.

        Only ``id`` is strictly required; other fields fall back to the
        defaults used when the record was created.
        """

        record_id = coerce_record_id(data.get("id"))
        raw_hours = data.get("hoursPlayed")
        hours = parse_stored_hours(raw_hours)
        if hours is None:
            if raw_hours not in (None, ""):
                logger.warning(
                    "Game %s has unreadable hoursPlayed %r; using 0", record_id, raw_hours
                )
            hours = 0

        return cls(
            id=record_id,
            title=str(data.get("title") or ""),
            genre=str(data.get("genre") or ""),
            price=data.get("price", 0),
            hours_played=hours,
            buy_link=str(data.get("buyLink") or DEFAULT_BUY_LINK),
            date_added=str(data.get("dateAdded") or ""),
        )
