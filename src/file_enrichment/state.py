"""Wiring for one enrichment unit: store, engine and background refresher."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from file_enrichment.enrichment import EnrichmentEngine
from file_enrichment.parser import parse_dictionary
from file_enrichment.refresher import Refresher
from file_enrichment.store import DictionaryStore, ParseFn

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, MutableMapping

    from file_enrichment.config import Settings


@dataclass
class AppState:
    settings: Settings
    store: DictionaryStore
    engine: EnrichmentEngine
    refresher: Refresher

    def enrich(self, record: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        return self.engine.enrich(record)


def build_state(settings: Settings, parse: ParseFn = parse_dictionary) -> AppState:
    """Load the initial dictionary and wire the components.

    Raises ``FatalConfigurationError`` if the initial load fails. The
    refresher is created but not started.
    """
    cfg = settings.enrichment
    store = DictionaryStore(parse=parse)
    store.initialize(cfg.dictionary_path, cfg.separator)
    return AppState(
        settings=settings,
        store=store,
        engine=EnrichmentEngine(store, cfg),
        refresher=Refresher(store, cfg.dictionary_path, cfg.separator, cfg.refresh_interval),
    )


@asynccontextmanager
async def lifespan(
    settings: Settings, parse: ParseFn = parse_dictionary
) -> AsyncIterator[AppState]:
    """Run an enrichment unit with its refresher for the duration of the block."""
    state = build_state(settings, parse=parse)
    state.refresher.start()
    try:
        yield state
    finally:
        await state.refresher.stop()
