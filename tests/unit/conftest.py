"""Unit-specific fixtures (no I/O beyond tmp_path dictionary files)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from file_enrichment.parser import parse_dictionary
from file_enrichment.store import DictionaryStore

if TYPE_CHECKING:
    from pathlib import Path


class CountingParser:
    """Wraps parse_dictionary and counts how often it runs."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, raw: bytes, separator: str) -> dict[str, Any]:
        self.calls += 1
        return parse_dictionary(raw, separator)


@pytest.fixture()
def counting_parser() -> CountingParser:
    return CountingParser()


@pytest.fixture()
def store(dictionary_path: Path, counting_parser: CountingParser) -> DictionaryStore:
    """Store already initialized from the sample dictionary."""
    s = DictionaryStore(parse=counting_parser)
    s.initialize(dictionary_path, ":")
    return s
