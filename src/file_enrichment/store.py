"""In-memory dictionary store with copy-on-write snapshots.

Readers call ``current()`` and get an immutable ``DictionarySnapshot``.
The refresher builds a complete new snapshot off to the side and installs it
with ``try_replace()``, which is a single reference assignment. No lock is
needed on the read path: a reader sees either the old snapshot or the new
one, never a mixture.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from file_enrichment.errors import (
    DictionaryParseError,
    FatalConfigurationError,
    FileMissingError,
    StoreNotInitializedError,
)
from file_enrichment.models.dictionary import DictionarySnapshot
from file_enrichment.parser import fingerprint, parse_dictionary

log = structlog.get_logger()

ParseFn = Callable[[bytes, str], dict[str, Any]]


def read_dictionary_file(path: Path) -> bytes:
    """Read the raw dictionary bytes. Raises ``FileMissingError`` if absent."""
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise FileMissingError(str(path)) from exc


class DictionaryStore:
    """Holds the active dictionary snapshot."""

    def __init__(self, parse: ParseFn = parse_dictionary) -> None:
        self._parse = parse
        self._snapshot: DictionarySnapshot | None = None

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None

    def current(self) -> DictionarySnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise StoreNotInitializedError()
        return snapshot

    def try_replace(self, snapshot: DictionarySnapshot) -> None:
        self._snapshot = snapshot

    def load_snapshot(
        self, path: Path, separator: str, raw: bytes | None = None
    ) -> DictionarySnapshot:
        """Build a snapshot from ``path`` without installing it.

        ``raw`` may be passed when the caller already read the file (e.g. to
        fingerprint it). Parse errors propagate unchanged.
        """
        if raw is None:
            raw = read_dictionary_file(path)
        entries = self._parse(raw, separator)
        return DictionarySnapshot(
            entries=entries,
            fingerprint=fingerprint(raw),
            loaded_at=datetime.now(UTC),
            path=path,
        )

    def initialize(self, path: Path, separator: str) -> DictionarySnapshot:
        """Load the dictionary for the first time. Called once at startup.

        Any failure is fatal: without an initial dictionary there is nothing
        to enrich with, so the unit must refuse to start.
        """
        try:
            snapshot = self.load_snapshot(path, separator)
        except DictionaryParseError as exc:
            log.error(
                "dictionary_initial_load_failed",
                path=str(path),
                line=exc.line,
                error=exc.message,
            )
            raise FatalConfigurationError(
                f"Error loading dictionary file {path}: {exc.message}"
            ) from exc
        except (FileMissingError, OSError) as exc:
            log.error("dictionary_initial_load_failed", path=str(path), error=str(exc))
            raise FatalConfigurationError(
                f"Error loading dictionary file {path}: {exc}"
            ) from exc

        self.try_replace(snapshot)
        log.info(
            "dictionary_loaded",
            path=str(path),
            entries=len(snapshot),
            fingerprint=snapshot.fingerprint,
        )
        return snapshot
