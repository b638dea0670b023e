from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .record_sources import DEFAULT_TIMEOUT
from .storage import JsonFileStore, MemoryStore, PersistentStore

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Settings for one dashboard process; the app launches with the defaults."""

    data_dir: Path = Path(".schema-dashboard")
    persist: bool = True
    record_source_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    server_name: Optional[str] = None
    server_port: Optional[int] = None

    def __post_init__(self):
        if self.record_source_timeout <= 0:
            raise ValueError("record_source_timeout must be positive")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_store(config: AppConfig) -> PersistentStore:
    if config.persist:
        return PersistentStore(JsonFileStore(config.data_dir))
    return PersistentStore(MemoryStore())
