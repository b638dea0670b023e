from __future__ import annotations

from typing import Any, List, Optional, Tuple

import gradio as gr
from pydantic import ValidationError

from .context import DataContext
from .models import RelationshipType, SchemaField

RELATIONSHIP_TABLE_HEADERS = ["Name", "Source", "Target", "Type", "Description", "ID"]
RELATIONSHIP_TYPES = [t.value for t in RelationshipType]
FIELD_CHOICE_SEP = "::"


def field_choice_value(schema_field: SchemaField) -> str:
    return f"{schema_field.schema_id}{FIELD_CHOICE_SEP}{schema_field.path}"


def field_choices(context: DataContext) -> List[Tuple[str, str]]:
    return [
        (f"{schema.name} › {f.path} ({f.type})", field_choice_value(f))
        for schema in context.schemas
        for f in schema.fields
    ]


def parse_field_choice(context: DataContext, value: Optional[str]) -> Optional[SchemaField]:
    if not value or FIELD_CHOICE_SEP not in value:
        return None
    schema_id, path = value.split(FIELD_CHOICE_SEP, 1)
    return context.find_field(schema_id, path)


def describe_field(context: DataContext, schema_field: SchemaField) -> str:
    schema = context.get_schema(schema_field.schema_id)
    schema_name = schema.name if schema else "Unknown Schema"
    return f"{schema_name}.{schema_field.path}"


def relationship_table(context: DataContext) -> List[List[Any]]:
    return [
        [
            r.name,
            describe_field(context, r.source_field),
            describe_field(context, r.target_field),
            r.type.value,
            r.description or "",
            r.id,
        ]
        for r in context.relationships
    ]


def relationship_choices(context: DataContext) -> List[Tuple[str, str]]:
    return [(r.name, r.id) for r in context.relationships]


def refresh_relationship_tab(context: DataContext):
    """Returns (source dropdown, target dropdown, relationship table, delete dropdown)."""
    choices = field_choices(context)
    return (
        gr.update(choices=choices, value=None),
        gr.update(choices=choices, value=None),
        relationship_table(context),
        gr.update(choices=relationship_choices(context), value=None),
    )


def add_relationship_handler(
    context: DataContext,
    name: str,
    source_choice: Optional[str],
    target_choice: Optional[str],
    relationship_type: str,
    description: str,
):
    """Returns (status, name box, relationship table, delete dropdown)."""
    source_field = parse_field_choice(context, source_choice)
    target_field = parse_field_choice(context, target_choice)
    name = (name or "").strip()

    if source_field is None or target_field is None or not name:
        return (
            "Pick a source field, a target field and a name.",
            gr.update(),
            relationship_table(context),
            gr.update(choices=relationship_choices(context)),
        )

    try:
        relationship = context.add_relationship(
            name,
            source_field,
            target_field,
            relationship_type or RelationshipType.ONE_TO_ONE,
            (description or "").strip() or None,
        )
    except ValidationError as exc:
        return f"Invalid relationship: {exc.errors()[0]['msg']}", gr.update(), relationship_table(context), gr.update(choices=relationship_choices(context))

    return (
        f"Created relationship '{relationship.name}'.",
        "",
        relationship_table(context),
        gr.update(choices=relationship_choices(context), value=None),
    )


def remove_relationship_handler(context: DataContext, relationship_id: Optional[str]):
    """Returns (status, relationship table, delete dropdown)."""
    relationship = context.get_relationship(relationship_id) if relationship_id else None
    if relationship is None:
        return "Select a relationship to delete.", relationship_table(context), gr.update(choices=relationship_choices(context))

    context.remove_relationship(relationship.id)
    return (
        f"Deleted relationship '{relationship.name}'.",
        relationship_table(context),
        gr.update(choices=relationship_choices(context), value=None),
    )
