"""IGDB catalog API routes."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from flask import Blueprint, request

from igdb.client import AuthError, FetchError, IGDBClient
from library import merge as library_merge
from library import store as library_store
from routes.api_utils import (
    BadRequestError,
    UpstreamServiceError,
    handle_api_errors,
    success_response,
)

catalog_blueprint = Blueprint("catalog", __name__, url_prefix="/api/igdb")

_context: dict[str, Any] = {}


def configure(context: Mapping[str, Any]) -> None:
    """Provide shared state required by the catalog endpoints."""
    _context.update(context)


def _ctx(key: str) -> Any:
    if key not in _context:
        raise RuntimeError(f"catalog routes missing context value: {key}")
    return _context[key]


def _get_client() -> IGDBClient:
    getter: Callable[[], IGDBClient] = _ctx("get_igdb_client")
    return getter()


def _get_store() -> library_store.LibraryStore:
    getter: Callable[[], library_store.LibraryStore] = _ctx("get_store")
    return getter()


def _query_catalog(operation: Callable[..., list[Any]], *args: Any) -> list[Any]:
    try:
        return operation(*args)
    except AuthError as exc:
        raise UpstreamServiceError("Failed to authenticate with IGDB") from exc
    except FetchError as exc:
        raise UpstreamServiceError("Failed to fetch games from IGDB") from exc


def _parse_genre_id(value: str | None) -> int:
    text = (value or "").strip()
    if not text:
        raise BadRequestError("Genre ID is required")
    try:
        genre_id = int(text)
    except ValueError as exc:
        raise BadRequestError("Genre ID must be an integer") from exc
    if genre_id <= 0:
        raise BadRequestError("Genre ID must be a positive integer")
    return genre_id


@catalog_blueprint.route("/trending")
@handle_api_errors
def trending_games():
    games = _query_catalog(_get_client().get_trending_games)
    return success_response(games, message="Trending games fetched from IGDB")


@catalog_blueprint.route("/search/", defaults={"name": ""})
@catalog_blueprint.route("/search/<path:name>")
@handle_api_errors
def search_games(name: str):
    if not name or not name.strip():
        raise BadRequestError("Game name is required")
    games = _query_catalog(_get_client().search_games_by_name, name)
    return success_response(games, message=f'Search results for "{name}"')


@catalog_blueprint.route("/genre/", defaults={"genre_id": None})
@catalog_blueprint.route("/genre/<genre_id>")
@handle_api_errors
def games_by_genre(genre_id: str | None):
    numeric_id = _parse_genre_id(genre_id)
    games = _query_catalog(_get_client().get_games_by_genre, numeric_id)
    return success_response(games, message=f"Games fetched for genre ID: {numeric_id}")


@catalog_blueprint.route("/discover")
@handle_api_errors
def discover_games():
    filter_value = (request.args.get("filter") or "all").strip().lower()
    if filter_value not in library_merge.MERGE_FILTERS:
        raise BadRequestError(
            f"filter must be one of: {', '.join(library_merge.MERGE_FILTERS)}"
        )
    catalog: list[Any] = []
    if filter_value != "library":
        catalog = _query_catalog(_get_client().get_trending_games)
    merged = library_merge.merge_catalog_with_library(
        catalog, _get_store().list(), filter_value
    )
    return success_response(merged)


@catalog_blueprint.route("/library", methods=["POST"])
@handle_api_errors
def add_catalog_game():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict) or not data:
        raise BadRequestError("request body must be an IGDB game object")
    fields = library_merge.external_to_library_fields(data)
    try:
        record = _get_store().add(**fields)
    except library_store.ValidationError as exc:
        raise BadRequestError(str(exc)) from exc
    return success_response(
        record.to_dict(), message="Game added successfully", status_code=201
    )
