from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from pathlib import Path


@dataclass(frozen=True)
class DictionarySnapshot:
    """One fully parsed dictionary file.

    Replaced as a whole on reload, never mutated. A reader holding a snapshot
    keeps seeing the same entries even if a newer one is installed meanwhile.
    """

    entries: Mapping[str, Any]
    fingerprint: str  # SHA-256 of the raw file bytes
    loaded_at: datetime
    path: Path | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: str, default: Any = None) -> Any:
        return self.entries.get(key, default)


class RefreshOutcome(StrEnum):
    """Result of a single refresh tick."""

    UNCHANGED = "unchanged"
    RELOADED = "reloaded"
    MISSING = "missing"
    FAILED = "failed"
