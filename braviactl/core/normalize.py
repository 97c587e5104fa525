"""Flatten the television's result payloads into mappings and render reports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from braviactl.core.errors import MalformedResponseError
from braviactl.core.model import ApiResult, FlatResult, NestedResult


def normalize_flat(method: str, result: Any) -> FlatResult:
    """Return the single mapping held in a ``[{...}]`` result."""
    if not isinstance(result, list) or not result or not isinstance(result[0], Mapping):
        raise MalformedResponseError(f"{method} did not return a single-object result")
    return FlatResult(method=method, data=dict(result[0]))


def normalize_nested(method: str, result: Any) -> NestedResult:
    """Return the sequence of mappings held in a nested result.

    The television uses two layouts for this: ``[[{...}, ...]]`` and
    ``[meta, [{...}, ...]]``. The first list-valued element is the payload.
    """
    if not isinstance(result, list):
        raise MalformedResponseError(f"{method} did not return a result array")
    for element in result:
        if isinstance(element, list):
            return NestedResult(method=method, items=_copy_mappings(method, element))
    raise MalformedResponseError(f"{method} did not return a nested result array")


def normalize_listing(method: str, results: Any) -> NestedResult:
    """Return getMethodTypes rows as mappings."""
    if not isinstance(results, list):
        raise MalformedResponseError(f"{method} did not return a results array")
    items: list[dict[str, Any]] = []
    for row in results:
        if not isinstance(row, list) or len(row) < 4:
            raise MalformedResponseError(f"{method} returned an unexpected method row: {row!r}")
        items.append(
            {
                "name": row[0],
                "request": tuple(row[1] or ()),
                "response": tuple(row[2] or ()),
                "version": row[3],
            }
        )
    return NestedResult(method=method, items=tuple(items))


def _copy_mappings(method: str, elements: Iterable[Any]) -> tuple[dict[str, Any], ...]:
    items: list[dict[str, Any]] = []
    for element in elements:
        if not isinstance(element, Mapping):
            raise MalformedResponseError(f"{method} returned a non-object entry: {element!r}")
        items.append(dict(element))
    return tuple(items)


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    return str(value)


def _mapping_lines(mapping: Mapping[str, Any], indent: str = "\t") -> list[str]:
    return [f"{indent}{key}: {format_value(value)}" for key, value in mapping.items()]


def render_report(result: ApiResult, *, title: str | None = None) -> str:
    lines = [f"{title or result.method}:"]
    if isinstance(result, FlatResult):
        lines.extend(_mapping_lines(result.data))
    else:
        for item in result.items:
            lines.append("\n".join(_mapping_lines(item)) + "\n")
    return "\n".join(lines) + "\n"


def render_failure(method: str, message: str) -> str:
    return f"{method}:\n\t{message}\n"
