from __future__ import annotations

from typing import Any, List, Optional

import gradio as gr

from .context import DataContext
from .io_utils import JsonInputError, coerce_records, read_json_content
from .matching import load_dataset
from .record_sources import RecordSourceError, RecordSourceRegistry, run_record_source

PREVIEW_LIMIT = 3


def _preview(records: List[Any]):
    return records[:PREVIEW_LIMIT] if records else None


def upload_records_handler(file_obj):
    """Returns (pending records, status, preview)."""
    if file_obj is None:
        return [], "No file uploaded.", None
    try:
        records = coerce_records(read_json_content(file_obj))
    except JsonInputError as exc:
        return [], f"Invalid JSON file format: {exc}", None
    return records, f"{len(records)} records ready to load.", _preview(records)


def run_source_handler(registry: RecordSourceRegistry, timeout: float, source_name: Optional[str]):
    """Returns (pending records, status, preview)."""
    if not source_name:
        return [], "Select a record source.", None
    try:
        records = run_record_source(registry.get(source_name), timeout=timeout)
    except RecordSourceError as exc:
        return [], f"Error running record source: {exc}", None
    return records, f"{len(records)} records generated by '{source_name}'.", _preview(records)


def load_data_handler(context: DataContext, schema_id: Optional[str], records: Optional[List[Any]]):
    if not schema_id or not records:
        return "Select a schema and upload or generate records first."
    if context.get_schema(schema_id) is None:
        return "The selected schema no longer exists."

    entry = load_dataset(context, schema_id, records)
    return (
        f"Data loaded successfully! {len(entry.data)} records, "
        f"found {len(entry.relationships)} relationship matches."
    )


def clear_data_handler(context: DataContext):
    count = len(context.loaded_data)
    context.clear_loaded_data()
    return f"Cleared {count} loaded datasets.", gr.update(choices=[], value=None)
