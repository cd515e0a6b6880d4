"""Shared fixtures: dictionary files on disk and settings pointing at them."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from file_enrichment.config import EnrichmentSettings, Settings

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_DICTIONARY = (
    'A:{"field1":"valueA1","field2":"valueA2"}\n'
    'B:{"field1":"valueB1","field2":"valueB2"}\n'
)


@pytest.fixture()
def dictionary_path(tmp_path: Path) -> Path:
    path = tmp_path / "dictionary.txt"
    path.write_text(SAMPLE_DICTIONARY, encoding="utf-8")
    return path


@pytest.fixture()
def enrichment_settings(dictionary_path: Path) -> EnrichmentSettings:
    return EnrichmentSettings(field="data", dictionary_path=dictionary_path)


@pytest.fixture()
def settings(enrichment_settings: EnrichmentSettings) -> Settings:
    return Settings(enrichment=enrichment_settings)
