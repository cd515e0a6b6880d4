from __future__ import annotations

from file_enrichment.models.dictionary import DictionarySnapshot, RefreshOutcome

__all__ = [
    "DictionarySnapshot",
    "RefreshOutcome",
]
