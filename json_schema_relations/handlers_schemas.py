from __future__ import annotations

import os
from typing import Any, List, Optional, Tuple

import gradio as gr

from .context import DataContext
from .fields import build_field_tree
from .io_utils import JsonInputError, parse_json_text

SCHEMA_TABLE_HEADERS = ["Name", "Fields", "Created", "ID"]
FIELD_TABLE_HEADERS = ["Path", "Type"]


def schema_choices(context: DataContext) -> List[Tuple[str, str]]:
    return [(f"{s.name} ({len(s.fields)} fields)", s.id) for s in context.schemas]


def schema_table(context: DataContext) -> List[List[Any]]:
    return [
        [s.name, len(s.fields), s.created_at.strftime("%Y-%m-%d %H:%M"), s.id]
        for s in context.schemas
    ]


def schema_dropdown_update(context: DataContext, value: Optional[str] = None):
    choices = schema_choices(context)
    ids = [schema_id for _, schema_id in choices]
    return gr.update(choices=choices, value=value if value in ids else None)


def load_schema_file_handler(file_obj):
    """Fill the name and content boxes from an uploaded file."""
    if file_obj is None:
        return gr.update(), gr.update(), "No file uploaded."

    path = file_obj.name if hasattr(file_obj, 'name') else str(file_obj)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        return gr.update(), gr.update(), f"Error reading file: {exc}"

    name = os.path.basename(path)
    if name.lower().endswith('.json'):
        name = name[:-5]
    return name, content, f"Loaded {os.path.basename(path)}. Review and add the schema."


def add_schema_handler(context: DataContext, name: str, content_text: str):
    """Returns (status, name box, content box, schema table, schema dropdown)."""
    name = (name or "").strip()
    if not name or not (content_text or "").strip():
        return (
            "Enter a schema name and JSON content.",
            gr.update(),
            gr.update(),
            schema_table(context),
            schema_dropdown_update(context),
        )

    try:
        content = parse_json_text(content_text)
    except JsonInputError as exc:
        return (
            f"Invalid JSON format. Please check your schema. ({exc})",
            gr.update(),
            gr.update(),
            schema_table(context),
            schema_dropdown_update(context),
        )

    schema = context.add_schema(name, content)
    return (
        f"Added schema '{schema.name}' with {len(schema.fields)} fields.",
        "",
        "",
        schema_table(context),
        schema_dropdown_update(context, schema.id),
    )


def schema_detail_handler(context: DataContext, schema_id: Optional[str]):
    """Returns (field table, field tree, raw content) for the selected schema."""
    schema = context.get_schema(schema_id) if schema_id else None
    if schema is None:
        return [], None, None
    fields = [[f.path, f.type] for f in schema.fields]
    return fields, build_field_tree(schema.fields), schema.content


def remove_schema_handler(context: DataContext, schema_id: Optional[str]):
    """Returns (status, schema table, schema dropdown, field table, field tree, raw content)."""
    schema = context.get_schema(schema_id) if schema_id else None
    if schema is None:
        return "Select a schema to delete.", schema_table(context), schema_dropdown_update(context), [], None, None

    context.remove_schema(schema.id)
    return (
        f"Deleted schema '{schema.name}' and its relationships and loaded data.",
        schema_table(context),
        schema_dropdown_update(context),
        [],
        None,
        None,
    )
