from __future__ import annotations

from typing import Any, Dict, List

from pydantic import JsonValue, TypeAdapter

JsonRecord = Dict[str, JsonValue]

json_records = TypeAdapter(List[JsonValue])


def json_kind(value: Any) -> str:
    """Name the JSON kind of a decoded value.

    bool is checked before the numeric types since True/False are ints in Python.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"Not a JSON value: {type(value).__name__}")
