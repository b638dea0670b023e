"""Relationship matching over a batch of loaded records.

A relationship matches a record when both of its field paths resolve on that
same record. Values are not compared with each other: this is an existence
join, and every match carries the fixed confidence of an exact match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .context import DataContext
from .json_values import JsonValue
from .models import LoadedData, Match, ProcessedRelationship, Relationship
from .paths import MISSING, resolve_path

logger = logging.getLogger(__name__)

EXACT_MATCH_CONFIDENCE = 1.0


def relationships_for_schema(relationships: Iterable[Relationship], schema_id: str) -> List[Relationship]:
    return [rel for rel in relationships if rel.touches_schema(schema_id)]


def match_relationship(records: Sequence[JsonValue], relationship: Relationship) -> List[Match]:
    source_path = relationship.source_field.path
    target_path = relationship.target_field.path
    matches: List[Match] = []

    for record in records:
        source_value = resolve_path(record, source_path)
        target_value = resolve_path(record, target_path)
        if source_value is MISSING or target_value is MISSING:
            continue
        matches.append(
            Match(
                source_record={source_path: source_value},
                target_record={target_path: target_value},
                confidence=EXACT_MATCH_CONFIDENCE,
            )
        )
    return matches


def compute_matches(
    records: Sequence[JsonValue],
    schema_id: str,
    relationships: Iterable[Relationship],
) -> List[ProcessedRelationship]:
    processed: List[ProcessedRelationship] = []
    for relationship in relationships_for_schema(relationships, schema_id):
        matches = match_relationship(records, relationship)
        if not matches:
            continue
        processed.append(ProcessedRelationship(relationship_id=relationship.id, matches=tuple(matches)))
    return processed


def load_dataset(context: DataContext, schema_id: str, records: Sequence[JsonValue]) -> LoadedData:
    """Match `records` against the current relationships and store the result for `schema_id`."""
    entry = LoadedData(
        schema_id=schema_id,
        data=list(records),
        relationships=tuple(compute_matches(records, schema_id, context.relationships)),
    )
    context.add_loaded_data(entry)
    logger.info(
        "Loaded %d records for schema %s: %d relationships matched",
        len(entry.data),
        schema_id,
        len(entry.relationships),
    )
    return entry


@dataclass(frozen=True)
class RelationshipStats:
    total: int
    active: int
    matches: int


@dataclass(frozen=True)
class DashboardStats:
    schemas: int
    relationships: int
    datasets: int
    active_relationships: int


def relationship_stats(context: DataContext, schema_id: str) -> RelationshipStats:
    loaded = context.get_loaded_data(schema_id)
    if loaded is None:
        return RelationshipStats(total=0, active=0, matches=0)
    return RelationshipStats(
        total=len(relationships_for_schema(context.relationships, schema_id)),
        active=len(loaded.relationships),
        matches=loaded.match_count,
    )


def dashboard_stats(context: DataContext) -> DashboardStats:
    return DashboardStats(
        schemas=len(context.schemas),
        relationships=len(context.relationships),
        datasets=len(context.loaded_data),
        active_relationships=sum(len(d.relationships) for d in context.loaded_data),
    )
