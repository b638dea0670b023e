"""Named, operator-registered callables that produce records for loading.

A source takes no arguments and returns a record or a list of records. It is
run in a daemon worker thread with a deadline. A source still running after
the deadline is abandoned, not stopped, since Python threads cannot be killed;
being a daemon, it does not hold up interpreter shutdown either.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from .io_utils import coerce_records
from .json_values import JsonValue, json_records

logger = logging.getLogger(__name__)

RecordSource = Callable[[], Any]

DEFAULT_TIMEOUT = 5.0


class RecordSourceError(RuntimeError):
    """Raised when a record source is unknown or fails."""


class RecordSourceTimeout(RecordSourceError):
    """Raised when a record source does not return before its deadline."""


class RecordSourceRegistry:
    def __init__(self):
        self._sources: Dict[str, RecordSource] = {}

    def register(self, name: str, source: Optional[RecordSource] = None):
        """Register `source` under `name`; without `source`, return a decorator."""
        if source is None:
            def decorator(fn: RecordSource) -> RecordSource:
                self.register(name, fn)
                return fn
            return decorator

        if name in self._sources:
            raise ValueError(f"Record source '{name}' is already registered.")
        self._sources[name] = source
        return source

    def names(self) -> List[str]:
        return sorted(self._sources)

    def get(self, name: str) -> RecordSource:
        try:
            return self._sources[name]
        except KeyError:
            raise RecordSourceError(f"Unknown record source: {name}") from None

    def __contains__(self, name: str) -> bool:
        return name in self._sources


def run_record_source(source: RecordSource, timeout: float = DEFAULT_TIMEOUT) -> List[JsonValue]:
    outcome: Dict[str, Any] = {}

    def work():
        try:
            outcome["result"] = source()
        except Exception as exc:
            outcome["error"] = exc

    worker = threading.Thread(target=work, name="record-source", daemon=True)
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        logger.warning("Record source %r exceeded %.1fs and was abandoned", source, timeout)
        raise RecordSourceTimeout(f"Record source did not finish within {timeout:g} seconds.")
    if "error" in outcome:
        error = outcome["error"]
        raise RecordSourceError(f"Record source failed: {error}") from error

    try:
        return json_records.validate_python(coerce_records(outcome.get("result")))
    except ValidationError as exc:
        raise RecordSourceError(f"Record source returned non-JSON records: {exc.errors()[0]['msg']}") from exc


default_registry = RecordSourceRegistry()


@default_registry.register("sample-contacts")
def sample_contacts():
    return [
        {"id": 1, "name": "John Doe", "email": "john@example.com"},
        {"id": 2, "name": "Jane Smith", "email": "jane@example.com"},
    ]
