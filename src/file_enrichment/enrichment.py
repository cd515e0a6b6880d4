"""Per-record dictionary lookup and merge.

The key field may hold a scalar or a list. Either way it is normalised into
an ordered list of string candidates, and the first candidate present in the
dictionary wins. Later candidates are not consulted even if they would match.
"""

from __future__ import annotations

import copy
import json
import threading
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

import structlog

from file_enrichment.field_reference import get_field, has_field, parse_field_reference, set_field

if TYPE_CHECKING:
    from file_enrichment.config import EnrichmentSettings
    from file_enrichment.store import DictionaryStore

log = structlog.get_logger()

_MISSING = object()


def stringify_key(value: Any) -> str:
    """Render a record value the way it would appear as a dictionary key."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def candidate_keys(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [stringify_key(item) for item in value]
    return [stringify_key(value)]


class EnrichmentEngine:
    """Enriches records against the store's current snapshot."""

    def __init__(self, store: DictionaryStore, settings: EnrichmentSettings) -> None:
        self._store = store
        self._override = settings.override
        self._field = parse_field_reference(settings.field)
        self._destination = (
            parse_field_reference(settings.destination) if settings.destination else None
        )
        self._stats_lock = threading.Lock()
        self.matched = 0
        self.unmatched = 0
        self.skipped = 0

    def enrich(self, record: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Enrich ``record`` in place and return it.

        Never raises for a malformed record: unexpected failures are logged
        and the record is returned as it was.
        """
        try:
            value = self._match(record)
            if value is _MISSING:
                return record
            self._merge(record, value)
        except Exception:
            log.error("enrichment_error", exc_info=True)
        return record

    def _match(self, record: MutableMapping[str, Any]) -> Any:
        if not has_field(record, self._field):
            with self._stats_lock:
                self.skipped += 1
            return _MISSING

        # One snapshot per record so a concurrent reload can't split the lookup
        snapshot = self._store.current()
        for key in candidate_keys(get_field(record, self._field)):
            if key in snapshot:
                with self._stats_lock:
                    self.matched += 1
                return snapshot.get(key)

        with self._stats_lock:
            self.unmatched += 1
        return _MISSING

    def _merge(self, record: MutableMapping[str, Any], value: Any) -> None:
        if self._destination is None:
            if not isinstance(value, Mapping):
                log.warning(
                    "enrichment_value_not_object",
                    value_type=type(value).__name__,
                )
                return
            for name, item in value.items():
                if self._override or name not in record:
                    record[name] = copy.deepcopy(item)
            return

        if self._override or not has_field(record, self._destination):
            set_field(record, self._destination, copy.deepcopy(value))
