"""
Safe nested field access for schema-less lookup responses.

The dictionary service returns JSON whose shape varies per word: whole
sections may be missing, lists may be empty. Rather than deserializing
into a strict schema, fields are read by path with a fallback:

    get(data, "ec.word[0].usphone", "")

Missing segments give the default. A value that is present but null is
returned as None, so callers can tell "missing" from "null".
"""

import re
from typing import Any, List

_INDEX_PATTERN = re.compile(r'\[(\d+)\]')
_MISSING = object()


def split_path(path: str) -> List[str]:
    """Normalize `a.b[0].c` to segments ['a', 'b', '0', 'c']."""
    return _INDEX_PATTERN.sub(r'.\1', path).split('.')


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, dict):
        return current.get(segment, _MISSING)
    if isinstance(current, (list, tuple)) and segment.isdigit():
        index = int(segment)
        return current[index] if index < len(current) else _MISSING
    return _MISSING


def get(obj: Any, path: str, default: Any = "") -> Any:
    """
    Read a nested field, returning `default` if any segment is missing.

    Args:
        obj: Parsed JSON value (dict/list tree), or None
        path: Dotted path with optional [n] list indices
        default: Value returned when the path does not resolve

    Returns:
        The resolved value (possibly None), or `default`
    """
    if obj is None:
        return default

    current = obj
    for segment in split_path(path):
        if current is None:
            return default
        current = _step(current, segment)
        if current is _MISSING:
            return default

    return current
