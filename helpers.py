"""General-purpose helper utilities shared across the application."""

from __future__ import annotations

import numbers
from typing import Any, Iterable, Mapping


__all__ = [
    "_dedupe_preserve_order",
    "_format_name_list",
    "_parse_iterable",
]


def _dedupe_preserve_order(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        text = str(value).strip()
        if not text:
            continue
        key = text.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(text)
    return result


def _format_name_list(value: Any) -> str:
    return ", ".join(_dedupe_preserve_order(_parse_iterable(value)))


def _parse_iterable(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(',') if v.strip()]
    if isinstance(value, numbers.Number):
        return [str(value)]
    if isinstance(value, Mapping):
        name = value.get("name")
        return [name.strip()] if isinstance(name, str) and name.strip() else []
    try:
        iterator = iter(value)
    except TypeError:
        return [str(value)]
    items: list[str] = []
    for element in iterator:
        if isinstance(element, Mapping):
            name = element.get("name")
            if isinstance(name, str) and name.strip():
                items.append(name.strip())
            else:
                items.append(str(element).strip())
        else:
            items.append(str(element).strip())
    return [item for item in items if item]
