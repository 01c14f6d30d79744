"""Shape IGDB catalog games for display next to library records."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from helpers import _format_name_list
from library.models import DEFAULT_BUY_LINK, GameRecord

__all__ = [
    "DEFAULT_CATALOG_PRICE",
    "MERGE_FILTERS",
    "external_to_library_fields",
    "merge_catalog_with_library",
    "shape_external_game",
]

DEFAULT_CATALOG_PRICE = 29.99

MERGE_FILTERS = ("all", "trending", "library")


def _catalog_title(game: Mapping[str, Any]) -> str:
    name = game.get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    return "Unknown Game"


def _catalog_genre(game: Mapping[str, Any]) -> str:
    return _format_name_list(game.get("genres")) or "Unknown"


def external_to_library_fields(game: Mapping[str, Any]) -> dict[str, Any]:
    """Return :meth:`LibraryStore.add` keyword arguments for an IGDB game."""

    return {
        "title": _catalog_title(game),
        "genre": _catalog_genre(game),
        "hours_played": 0,
        "price": DEFAULT_CATALOG_PRICE,
        "buy_link": DEFAULT_BUY_LINK,
    }


def shape_external_game(game: Mapping[str, Any]) -> dict[str, Any]:
    rating = game.get("rating")
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        rating = None
    return {
        "id": game.get("id"),
        "title": _catalog_title(game),
        "genre": _catalog_genre(game),
        "hoursPlayed": 0,
        "price": DEFAULT_CATALOG_PRICE,
        "buyLink": DEFAULT_BUY_LINK,
        "rating": rating,
        "source": "igdb",
    }


def merge_catalog_with_library(
    catalog: Iterable[Any],
    records: Iterable[GameRecord],
    filter: str = "all",
) -> list[dict[str, Any]]:
    """Combine shaped catalog games with library records.

    Catalog entries come first, followed by the library. Each entry is
    flagged ``inLibrary`` when a library record carries the same title,
    compared case-insensitively.
    """

    if filter not in MERGE_FILTERS:
        raise ValueError(f"unknown filter: {filter!r}")

    local = [dict(record.to_dict(), source="local") for record in records]
    owned_titles = {entry["title"].casefold() for entry in local}
    shaped = [
        shape_external_game(game) for game in catalog if isinstance(game, Mapping)
    ]

    if filter == "trending":
        merged = shaped
    elif filter == "library":
        merged = local
    else:
        merged = shaped + local

    for entry in merged:
        entry["inLibrary"] = entry["title"].casefold() in owned_titles
    return merged
