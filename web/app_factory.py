"""Flask application factory and route wiring."""
from __future__ import annotations

from flask import Flask

from igdb.client import IGDBClient
from library.store import LibraryStore
from routes import catalog as routes_catalog
from routes import games as routes_games


def configure_blueprints(
    flask_app: Flask,
    *,
    store: LibraryStore,
    igdb_client: IGDBClient,
) -> None:
    """Hand the shared services to the route modules and register them."""

    routes_games.configure({
        'get_store': lambda: store,
    })
    routes_catalog.configure({
        'get_store': lambda: store,
        'get_igdb_client': lambda: igdb_client,
    })

    if 'games' not in flask_app.blueprints:
        flask_app.register_blueprint(routes_games.games_blueprint)
    if 'catalog' not in flask_app.blueprints:
        flask_app.register_blueprint(routes_catalog.catalog_blueprint)


def create_app(
    *,
    store: LibraryStore,
    igdb_client: IGDBClient,
    flask_app: Flask | None = None,
) -> Flask:
    """Return a configured Flask application serving ``store`` and ``igdb_client``."""
    if flask_app is None:
        flask_app = Flask('app')

    configure_blueprints(flask_app, store=store, igdb_client=igdb_client)
    return flask_app
