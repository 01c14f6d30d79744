"""Pytest fixtures shared across the test suite."""

import os
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="game-library-tests-"))
os.environ.setdefault('LIBRARY_FILE', os.fspath(_TEST_ROOT / 'games.json'))
os.environ.setdefault('LOG_DIR', os.fspath(_TEST_ROOT / 'logs'))

import pytest

from tests.app_helpers import FakeIGDBClient, build_app, build_store


@pytest.fixture
def store(tmp_path):
    return build_store(tmp_path)


@pytest.fixture
def igdb_client():
    return FakeIGDBClient(games=[{'id': 1942, 'name': 'The Witcher 3', 'rating': 93.4}])


@pytest.fixture
def app_client(tmp_path, store, igdb_client):
    flask_app = build_app(tmp_path, store=store, igdb_client=igdb_client)
    return flask_app, flask_app.test_client()
