"""Application startup orchestration helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from igdb.client import IGDBClient
from igdb.token import TokenCache
from library.store import LibraryStore

logger = logging.getLogger(__name__)


def initialize_app(
    *,
    library_file: str | os.PathLike[str],
    client_id: str,
    client_secret: str,
    timeout: float | None = None,
    validate_credentials: Callable[[], bool] | None = None,
) -> tuple[LibraryStore, IGDBClient]:
    """Perform the core startup tasks required for the application.

    The initializer makes sure the library file's directory exists, loads the
    library into memory and wires the IGDB client to a fresh token cache.
    Missing IGDB credentials are reported but do not stop startup; catalog
    endpoints will answer with an error until they are configured.
    """

    library_path = Path(library_file)
    try:
        library_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.exception("Could not create library directory %s", library_path.parent)

    store = LibraryStore(library_path)
    logger.info("Library loaded from %s with %s games", library_path, len(store.list()))

    if validate_credentials is not None and not validate_credentials():
        logger.warning("IGDB catalog endpoints are unavailable until credentials are set")

    token_cache = TokenCache(
        client_id=client_id,
        client_secret=client_secret,
        timeout=timeout,
    )
    client = IGDBClient(token_cache, timeout=timeout)
    return store, client


__all__ = ["initialize_app"]
