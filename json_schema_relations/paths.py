from __future__ import annotations

from typing import List, Union

from .json_values import JsonValue


class _Missing:
    """Marker for a path that does not resolve (distinct from a stored null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MISSING'

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def escape_path_segment(segment: str) -> str:
    """Escape a single key segment for dot-path representation.

    - Dots are escaped as '\\.' so keys like 'gpt-3.5-turbo' remain one segment.
    - Backslashes are escaped as '\\\\' so the path splits back to the same keys.
    """
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace('\\', '\\\\').replace('.', '\\.')


def join_path(parent: str, key: str) -> str:
    escaped = escape_path_segment(key)
    return f"{parent}.{escaped}" if parent else escaped


def split_path(path: str) -> List[str]:
    """Split a dot path on unescaped '.' and unescape each segment."""
    if not path:
        return []

    parts: List[str] = []
    buf: List[str] = []
    chars = iter(str(path))
    for ch in chars:
        if ch == '\\':
            # A trailing backslash stays literal.
            buf.append(next(chars, '\\'))
        elif ch == '.':
            parts.append(''.join(buf))
            buf = []
        else:
            buf.append(ch)
    parts.append(''.join(buf))
    return parts


def resolve_path(document: JsonValue, path: str) -> Union[JsonValue, _Missing]:
    """Walk `document` one segment at a time.

    Returns MISSING as soon as a key is absent or a segment lands on something
    that cannot be indexed. A stored None is a real value and is returned as is.
    """
    current = document
    for key in split_path(path):
        if isinstance(current, dict):
            if key not in current:
                return MISSING
            current = current[key]
        elif isinstance(current, list):
            if not (key.isascii() and key.isdecimal()) or int(key) >= len(current):
                return MISSING
            current = current[int(key)]
        else:
            return MISSING
    return current
