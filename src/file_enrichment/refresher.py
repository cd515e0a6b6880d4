"""Background dictionary refresh.

Every ``interval`` seconds the file is re-read and fingerprinted. Only a
changed fingerprint triggers a reparse. A failed reparse keeps the previous
snapshot active. Nothing that happens inside a tick is allowed to end the
loop; only cancellation does.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from file_enrichment.errors import DictionaryParseError, FileMissingError
from file_enrichment.models.dictionary import RefreshOutcome
from file_enrichment.parser import fingerprint
from file_enrichment.store import read_dictionary_file

if TYPE_CHECKING:
    from pathlib import Path

    from file_enrichment.store import DictionaryStore

log = structlog.get_logger()


class Refresher:
    def __init__(
        self,
        store: DictionaryStore,
        path: Path,
        separator: str,
        interval: float,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"refresh interval must be > 0, got {interval!r}")
        self._store = store
        self._path = path
        self._separator = separator
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> RefreshOutcome:
        """Run a single refresh tick and report what happened."""
        path = str(self._path)
        try:
            raw = await asyncio.to_thread(read_dictionary_file, self._path)
        except FileMissingError:
            log.error("dictionary_file_missing", path=path)
            return RefreshOutcome.MISSING
        except OSError as exc:
            log.error("dictionary_reload_failed", path=path, error=str(exc))
            return RefreshOutcome.FAILED

        new_fingerprint = await asyncio.to_thread(fingerprint, raw)
        if new_fingerprint == self._store.current().fingerprint:
            log.info(
                "dictionary_unchanged",
                path=path,
                next_check_seconds=self._interval,
            )
            return RefreshOutcome.UNCHANGED

        try:
            snapshot = await asyncio.to_thread(
                self._store.load_snapshot, self._path, self._separator, raw
            )
        except DictionaryParseError as exc:
            log.error(
                "dictionary_reload_failed",
                path=path,
                line=exc.line,
                error=exc.message,
            )
            return RefreshOutcome.FAILED

        self._store.try_replace(snapshot)
        log.info(
            "dictionary_reloaded",
            path=path,
            entries=len(snapshot),
            fingerprint=snapshot.fingerprint,
        )
        return RefreshOutcome.RELOADED

    async def run(self) -> None:
        """Refresh forever. Ends only on cancellation."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh_once()
            except Exception:
                log.error("refresher_tick_error", path=str(self._path), exc_info=True)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self.run(), name="file_enrichment.refresher")
        log.debug("refresher_started", path=str(self._path), interval=self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Only the refresher task's cancellation is expected here
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        log.debug("refresher_stopped", path=str(self._path))
