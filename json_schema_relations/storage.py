"""Persistence of the three dashboard collections.

The store keeps one serialized JSON document per collection key. Reads happen
once at startup and tolerate damage per key; writes overwrite the whole
collection and never raise, so the in-memory state stays authoritative.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .models import LoadedData, Relationship, Schema

logger = logging.getLogger(__name__)

SCHEMAS_KEY = "schemas"
RELATIONSHIPS_KEY = "relationships"
LOADED_DATA_KEY = "loaded-data"


class StorageQuotaError(OSError):
    """Raised by a backend when a write would exceed its capacity."""


class KeyValueStore:
    """Minimal string key-value interface, shaped after browser local storage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, items: Optional[Dict[str, str]] = None, quota: Optional[int] = None):
        self.items: Dict[str, str] = dict(items or {})
        self.quota = quota

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(v) for k, v in self.items.items() if k != key)
            if used + len(value) > self.quota:
                raise StorageQuotaError(f"Storage quota of {self.quota} characters exceeded writing '{key}'")
        self.items[key] = value


class JsonFileStore(KeyValueStore):
    """One `<key>.json` file per key inside `directory`."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


@dataclass
class StoreState:
    schemas: List[Schema] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    loaded_data: List[LoadedData] = field(default_factory=list)


_COLLECTIONS: Dict[str, TypeAdapter] = {
    SCHEMAS_KEY: TypeAdapter(List[Schema]),
    RELATIONSHIPS_KEY: TypeAdapter(List[Relationship]),
    LOADED_DATA_KEY: TypeAdapter(List[LoadedData]),
}


class PersistentStore:
    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def _load_collection(self, key: str) -> list:
        try:
            raw = self.backend.get_item(key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read collection '%s': %s", key, exc)
            return []
        if raw is None:
            return []

        try:
            return _COLLECTIONS[key].validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Discarding unreadable collection '%s' (%d errors): %s",
                key,
                exc.error_count(),
                exc.errors()[0]["msg"],
            )
            return []

    def load(self) -> StoreState:
        state = StoreState(
            schemas=self._load_collection(SCHEMAS_KEY),
            relationships=self._load_collection(RELATIONSHIPS_KEY),
            loaded_data=self._load_collection(LOADED_DATA_KEY),
        )
        logger.info(
            "Loaded %d schemas, %d relationships, %d datasets",
            len(state.schemas),
            len(state.relationships),
            len(state.loaded_data),
        )
        return state

    def save(self, collection_name: str, items: Sequence) -> bool:
        """Overwrite one collection. Returns False instead of raising on failure."""
        if collection_name not in _COLLECTIONS:
            raise KeyError(f"Unknown collection: {collection_name}")
        try:
            text = _COLLECTIONS[collection_name].dump_json(list(items), by_alias=True).decode("utf-8")
            self.backend.set_item(collection_name, text)
        except (OSError, PydanticSerializationError, ValueError):
            logger.exception("Failed to persist collection '%s'", collection_name)
            return False
        return True
