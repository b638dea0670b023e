from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .json_values import JsonValue, json_kind
from .models import SchemaField
from .paths import join_path, split_path


def extract_fields(document: JsonValue, schema_id: str, parent_path: str = '') -> List[SchemaField]:
    """List every key of a JSON object as a SchemaField, depth-first in key order.

    Nested objects get their own 'object' entry followed by their children.
    Arrays are reported as 'array' and never walked. A document that is not an
    object yields no fields.
    """
    fields: List[SchemaField] = []
    if not isinstance(document, dict):
        return fields

    for key, value in document.items():
        path = join_path(parent_path, key)
        fields.append(SchemaField(name=key, type=json_kind(value), path=path, schema_id=schema_id))
        if isinstance(value, dict):
            fields.extend(extract_fields(value, schema_id, path))
    return fields


def count_nested_keys(document: JsonValue) -> int:
    """Count keys across all nested objects (arrays are not entered)."""
    if not isinstance(document, dict):
        return 0
    return sum(1 + count_nested_keys(value) for value in document.values())


def build_field_tree(fields: Iterable[SchemaField]) -> Dict[str, Any]:
    """Nest fields by path for the schema detail view.

    Each node maps a key to {'type': ..., 'children': {...}}.
    """
    tree: Dict[str, Any] = {}
    for schema_field in fields:
        parts = split_path(schema_field.path)
        if not parts:
            continue
        current = tree
        for part in parts[:-1]:
            node = current.setdefault(part, {'type': 'object', 'children': {}})
            current = node['children']
        node = current.setdefault(parts[-1], {'type': schema_field.type, 'children': {}})
        node['type'] = schema_field.type
    return tree
