"""Low level urllib helpers shared by the IGDB token cache and client."""

from __future__ import annotations

import json
from typing import Any, Callable
from urllib.error import HTTPError

__all__ = ["format_http_error", "request_json"]


def request_json(
    request: Any,
    opener: Callable[..., Any],
    *,
    timeout: float | None,
    error_cls: type[Exception],
    error_prefix: str,
    generic_error: str,
) -> Any:
    """Open ``request`` and return the decoded JSON body.

    Every failure is re-raised as ``error_cls`` chained to the original
    exception. An empty body decodes to ``None``.
    """

    try:
        with opener(request, timeout=timeout) as response:
            body = response.read()
    except HTTPError as exc:
        raise error_cls(format_http_error(error_prefix, exc)) from exc
    except Exception as exc:
        raise error_cls(f"{generic_error}: {exc}") from exc
    try:
        text = body.decode("utf-8") if body else ""
    except UnicodeDecodeError as exc:
        raise error_cls(f"{generic_error}: undecodable response body") from exc
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError as exc:
        raise error_cls("invalid JSON response from IGDB") from exc


def format_http_error(prefix: str, error: HTTPError) -> str:
    message = f"{prefix}: {error.code}"
    error_message = ""
    try:
        error_body = error.read()
    except Exception:  # pragma: no cover - best effort to capture error body
        error_body = b""
    if error_body:
        error_message = error_body.decode("utf-8", errors="replace").strip()
    if not error_message and error.reason:
        error_message = str(error.reason)
    if error_message:
        message = f"{message} {error_message}"
    return message
