from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Optional, Tuple, Union
from uuid import uuid4

from .fields import extract_fields
from .json_values import JsonValue
from .models import LoadedData, Relationship, RelationshipType, Schema, SchemaField
from .storage import (
    LOADED_DATA_KEY,
    RELATIONSHIPS_KEY,
    SCHEMAS_KEY,
    PersistentStore,
    StoreState,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid4().hex


class DataContext:
    """In-memory schemas, relationships and loaded datasets, written through to a store.

    The six add/remove/clear methods are the only way to change state. Each
    runs under one lock, since Gradio serves events from several threads. Every
    mutation updates memory first and then saves the touched collections; a
    failed save is logged by the store and does not undo the change.
    """

    def __init__(self, store: PersistentStore, state: Optional[StoreState] = None):
        self.store = store
        state = state or StoreState()
        self._schemas = list(state.schemas)
        self._relationships = list(state.relationships)
        self._loaded_data = list(state.loaded_data)
        self._lock = threading.RLock()

    @classmethod
    def open(cls, store: PersistentStore) -> "DataContext":
        return cls(store, store.load())

    # Snapshots

    @property
    def schemas(self) -> Tuple[Schema, ...]:
        return tuple(self._schemas)

    @property
    def relationships(self) -> Tuple[Relationship, ...]:
        return tuple(self._relationships)

    @property
    def loaded_data(self) -> Tuple[LoadedData, ...]:
        return tuple(self._loaded_data)

    def get_schema(self, schema_id: str) -> Optional[Schema]:
        return next((s for s in self._schemas if s.id == schema_id), None)

    def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        return next((r for r in self._relationships if r.id == relationship_id), None)

    def get_loaded_data(self, schema_id: str) -> Optional[LoadedData]:
        return next((d for d in self._loaded_data if d.schema_id == schema_id), None)

    def find_field(self, schema_id: str, path: str) -> Optional[SchemaField]:
        schema = self.get_schema(schema_id)
        if schema is None:
            return None
        return next((f for f in schema.fields if f.path == path), None)

    # Mutations

    def add_schema(self, name: str, content: JsonValue) -> Schema:
        schema_id = new_id()
        schema = Schema(
            id=schema_id,
            name=name,
            content=content,
            fields=tuple(extract_fields(content, schema_id)),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._schemas.append(schema)
            self.store.save(SCHEMAS_KEY, self._schemas)
        logger.info("Added schema %s (%s) with %d fields", schema.name, schema.id, len(schema.fields))
        return schema

    def remove_schema(self, schema_id: str) -> None:
        with self._lock:
            if self.get_schema(schema_id) is None:
                logger.debug("remove_schema: no schema %s", schema_id)

            self._schemas = [s for s in self._schemas if s.id != schema_id]
            kept = [r for r in self._relationships if not r.touches_schema(schema_id)]
            dropped = len(self._relationships) - len(kept)
            self._relationships = kept
            self._loaded_data = [d for d in self._loaded_data if d.schema_id != schema_id]

            self.store.save(SCHEMAS_KEY, self._schemas)
            self.store.save(RELATIONSHIPS_KEY, self._relationships)
            self.store.save(LOADED_DATA_KEY, self._loaded_data)
        logger.info("Removed schema %s and %d dependent relationships", schema_id, dropped)

    def add_relationship(
        self,
        name: str,
        source_field: SchemaField,
        target_field: SchemaField,
        relationship_type: Union[str, RelationshipType] = RelationshipType.ONE_TO_ONE,
        description: Optional[str] = None,
    ) -> Relationship:
        """Raises pydantic.ValidationError for an unknown relationship type."""
        relationship = Relationship(
            id=new_id(),
            name=name,
            source_field=source_field,
            target_field=target_field,
            type=relationship_type,
            description=description,
        )
        with self._lock:
            self._relationships.append(relationship)
            self.store.save(RELATIONSHIPS_KEY, self._relationships)
        logger.info(
            "Added relationship %s: %s -> %s",
            relationship.name,
            source_field.path,
            target_field.path,
        )
        return relationship

    def remove_relationship(self, relationship_id: str) -> None:
        # Processed matches already stored for this relationship are left alone.
        with self._lock:
            before = len(self._relationships)
            self._relationships = [r for r in self._relationships if r.id != relationship_id]
            if len(self._relationships) == before:
                logger.debug("remove_relationship: no relationship %s", relationship_id)
            self.store.save(RELATIONSHIPS_KEY, self._relationships)

    def add_loaded_data(self, entry: LoadedData) -> None:
        with self._lock:
            for index, existing in enumerate(self._loaded_data):
                if existing.schema_id == entry.schema_id:
                    self._loaded_data[index] = entry
                    break
            else:
                self._loaded_data.append(entry)
            self.store.save(LOADED_DATA_KEY, self._loaded_data)
        logger.info(
            "Stored %d records for schema %s (%d processed relationships)",
            len(entry.data),
            entry.schema_id,
            len(entry.relationships),
        )

    def clear_loaded_data(self) -> None:
        with self._lock:
            self._loaded_data = []
            self.store.save(LOADED_DATA_KEY, self._loaded_data)
