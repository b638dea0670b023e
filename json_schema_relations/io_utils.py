from __future__ import annotations

import json
from typing import List

from .json_values import JsonValue


class JsonInputError(ValueError):
    """Raised when an uploaded or pasted document is not valid JSON."""


def _decode(text: str) -> JsonValue:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise JsonInputError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise JsonInputError("Invalid JSON: document is nested too deeply.") from exc


def read_json_content(file_obj) -> JsonValue:
    """Read JSON content from an uploaded file or file path."""
    if file_obj is None:
        raise JsonInputError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return _decode(content)

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise JsonInputError(f"Could not read {path}: {exc}") from exc
    return _decode(content)


def parse_json_text(text: str) -> JsonValue:
    if text is None or not text.strip():
        raise JsonInputError("No JSON content provided.")
    return _decode(text)


def coerce_records(data: JsonValue) -> List[JsonValue]:
    """A JSON array is a batch of records; anything else is a single record."""
    if isinstance(data, list):
        return data
    return [data]
