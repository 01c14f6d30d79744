"""Library CRUD API routes."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from flask import Blueprint, request

from library import store as library_store
from routes.api_utils import (
    BadRequestError,
    NotFoundError,
    handle_api_errors,
    register_api_error_handlers,
    success_response,
)

games_blueprint = Blueprint("games", __name__, url_prefix="/api/games")
register_api_error_handlers(games_blueprint)

_context: dict[str, Any] = {}


def configure(context: Mapping[str, Any]) -> None:
    """Provide shared state required by the library endpoints."""
    _context.update(context)


def _ctx(key: str) -> Any:
    if key not in _context:
        raise RuntimeError(f"games routes missing context value: {key}")
    return _context[key]


def _get_store() -> library_store.LibraryStore:
    getter: Callable[[], library_store.LibraryStore] = _ctx("get_store")
    return getter()


def _json_body() -> dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequestError("request body must be a JSON object")
    return data


def _call_store(operation: Callable[..., Any], *args: Any) -> Any:
    try:
        return operation(*args)
    except library_store.ValidationError as exc:
        raise BadRequestError(str(exc)) from exc
    except library_store.NotFoundError as exc:
        raise NotFoundError("Game not found") from exc


@games_blueprint.route("", methods=["GET"])
@handle_api_errors
def list_games():
    games = [record.to_dict() for record in _get_store().list()]
    return success_response(games)


@games_blueprint.route("", methods=["POST"])
@handle_api_errors
def add_game():
    data = _json_body()
    record = _call_store(
        _get_store().add,
        data.get("title"),
        data.get("genre"),
        data.get("hoursPlayed"),
        data.get("price"),
        data.get("buyLink"),
    )
    return success_response(
        record.to_dict(), message="Game added successfully", status_code=201
    )


@games_blueprint.route("/<game_id>", methods=["DELETE"])
@handle_api_errors
def delete_game(game_id: str):
    record = _call_store(_get_store().remove, game_id)
    return success_response(record.to_dict(), message="Game deleted successfully")


@games_blueprint.route("/<game_id>", methods=["PUT"])
@handle_api_errors
def update_hours_played(game_id: str):
    data = _json_body()
    record = _call_store(_get_store().update_hours, game_id, data.get("hoursPlayed"))
    return success_response(
        record.to_dict(), message="Hours played updated successfully"
    )
