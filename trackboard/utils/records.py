"""Helpers for reading nested fields of raw tracker records."""

from typing import Any, Mapping

_EMPTY: Mapping[str, Any] = {}


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return ``value`` if it is a mapping, otherwise an empty one.

    Nested objects such as a task's ``status`` or an entry's ``task`` are
    sometimes missing or arrive as bare strings; both read as empty.
    """
    return value if isinstance(value, Mapping) else _EMPTY
