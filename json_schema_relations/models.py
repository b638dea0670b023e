"""Data model for schemas, relationships and loaded datasets.

Every entity converts to and from the camelCase layout used by the persisted
collections (`schemaId`, `createdAt`, `sourceField`, ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .json_values import JsonRecord, JsonValue

T = TypeVar("T", bound="DashboardModel")


class RelationshipType(str, Enum):
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


class DashboardModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        return cls.model_validate(data)


class SchemaField(DashboardModel):
    name: str
    type: str
    path: str
    schema_id: str


class Schema(DashboardModel):
    id: str
    name: str
    content: JsonValue
    fields: Tuple[SchemaField, ...] = ()
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Relationship(DashboardModel):
    id: str
    name: str
    source_field: SchemaField
    target_field: SchemaField
    type: RelationshipType
    description: Optional[str] = None

    def touches_schema(self, schema_id: str) -> bool:
        return self.source_field.schema_id == schema_id or self.target_field.schema_id == schema_id


class Match(DashboardModel):
    source_record: JsonRecord
    target_record: JsonRecord
    confidence: float = Field(ge=0.0, le=1.0)


class ProcessedRelationship(DashboardModel):
    relationship_id: str
    matches: Tuple[Match, ...] = ()


class LoadedData(DashboardModel):
    schema_id: str
    data: List[JsonValue]
    relationships: Tuple[ProcessedRelationship, ...] = ()

    @property
    def match_count(self) -> int:
        return sum(len(rel.matches) for rel in self.relationships)
