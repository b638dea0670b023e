from __future__ import annotations

import json
from typing import Any, List, Optional, Tuple

import gradio as gr

from .context import DataContext
from .matching import dashboard_stats, relationship_stats

RELATIONSHIP_SUMMARY_HEADERS = ["Relationship", "Fields", "Type", "Matches"]
MATCH_TABLE_HEADERS = ["Relationship", "Source", "Target", "Confidence"]
STRUCTURE_TABLE_HEADERS = ["Path", "Type"]
RECORD_PREVIEW_LIMIT = 5
MATCHES_PER_RELATIONSHIP = 10
RECENT_SCHEMAS = 3


def _schema_name(context: DataContext, schema_id: str) -> str:
    schema = context.get_schema(schema_id)
    return schema.name if schema else "Unknown Schema"


def dataset_choices(context: DataContext) -> List[Tuple[str, str]]:
    return [
        (f"{_schema_name(context, d.schema_id)} ({len(d.data)} records)", d.schema_id)
        for d in context.loaded_data
    ]


def refresh_dataset_dropdown(context: DataContext, current: Optional[str] = None):
    choices = dataset_choices(context)
    ids = [schema_id for _, schema_id in choices]
    return gr.update(choices=choices, value=current if current in ids else None)


def _compact(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _relationship_name(context: DataContext, relationship_id: str) -> str:
    relationship = context.get_relationship(relationship_id)
    # Stale entries survive relationship deletion until the data is reloaded.
    return relationship.name if relationship else f"(deleted) {relationship_id}"


def relationship_rows(context: DataContext, schema_id: str) -> List[List[Any]]:
    """One summary row per processed relationship of a loaded dataset."""
    loaded = context.get_loaded_data(schema_id)
    if loaded is None:
        return []

    rows: List[List[Any]] = []
    for processed in loaded.relationships:
        relationship = context.get_relationship(processed.relationship_id)
        if relationship is None:
            rows.append([_relationship_name(context, processed.relationship_id), "", "", len(processed.matches)])
            continue
        rows.append([
            relationship.name,
            f"{relationship.source_field.path} → {relationship.target_field.path}",
            relationship.type.value,
            len(processed.matches),
        ])
    return rows


def schema_structure_rows(context: DataContext, schema_id: str) -> List[List[str]]:
    schema = context.get_schema(schema_id)
    if schema is None:
        return []
    return [[f.path, f.type] for f in schema.fields]


def match_rows(context: DataContext, schema_id: str) -> List[List[Any]]:
    loaded = context.get_loaded_data(schema_id)
    if loaded is None:
        return []

    rows: List[List[Any]] = []
    for processed in loaded.relationships:
        name = _relationship_name(context, processed.relationship_id)
        for match in processed.matches[:MATCHES_PER_RELATIONSHIP]:
            rows.append([name, _compact(match.source_record), _compact(match.target_record), match.confidence])
        hidden = len(processed.matches) - MATCHES_PER_RELATIONSHIP
        if hidden > 0:
            rows.append([name, f"... and {hidden} more matches", "", None])
    return rows


def show_dataset_handler(context: DataContext, schema_id: Optional[str]):
    """Returns (stats markdown, record preview, relationship table, match table, structure table)."""
    if not schema_id or context.get_loaded_data(schema_id) is None:
        return "Select a loaded dataset.", None, [], [], []

    loaded = context.get_loaded_data(schema_id)
    stats = relationship_stats(context, schema_id)
    summary = (
        f"**{_schema_name(context, schema_id)}** | "
        f"Records: {len(loaded.data)} | "
        f"Relationships: {stats.total} (active {stats.active}) | "
        f"Matches: {stats.matches}"
    )
    return (
        summary,
        loaded.data[:RECORD_PREVIEW_LIMIT],
        relationship_rows(context, schema_id),
        match_rows(context, schema_id),
        schema_structure_rows(context, schema_id),
    )


def dashboard_summary(context: DataContext) -> str:
    stats = dashboard_stats(context)
    lines = [
        f"- **Schemas:** {stats.schemas}",
        f"- **Relationships:** {stats.relationships}",
        f"- **Loaded datasets:** {stats.datasets}",
        f"- **Active relationships:** {stats.active_relationships}",
        "",
        "### Recent schemas",
    ]
    recent = context.schemas[-RECENT_SCHEMAS:]
    if not recent:
        lines.append("No schemas uploaded yet.")
    for schema in reversed(recent):
        lines.append(f"- {schema.name}: {len(schema.fields)} fields, added {schema.created_at:%Y-%m-%d}")
    return "\n".join(lines)
