"""JSON-lines host pipeline: one record per line on stdin, enriched on stdout."""

from __future__ import annotations

import asyncio
import json
import threading
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from file_enrichment.state import AppState

log = structlog.get_logger()


def process_line(state: AppState, line: str) -> str:
    """Enrich one JSON line. Anything that isn't a JSON object passes through."""
    try:
        record = json.loads(line)
    except json.JSONDecodeError as exc:
        log.warning("pipeline_invalid_record", error=exc.msg)
        return line
    if not isinstance(record, dict):
        log.warning("pipeline_invalid_record", error="record is not a JSON object")
        return line
    return json.dumps(state.enrich(record), ensure_ascii=False)


def start_line_reader(reader: TextIO) -> asyncio.Queue[str | None]:
    """Feed ``reader`` into a queue from a daemon thread. ``None`` marks EOF.

    A blocked ``readline`` must not hold up interpreter exit, so the thread
    is a daemon rather than a default-executor worker.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[str | None] = asyncio.Queue()

    def put(item: str | None) -> None:
        if not loop.is_closed():
            loop.call_soon_threadsafe(queue.put_nowait, item)

    def pump() -> None:
        try:
            for line in iter(reader.readline, ""):
                put(line)
        finally:
            put(None)

    threading.Thread(target=pump, name="file_enrichment.reader", daemon=True).start()
    return queue


async def run_pipeline(state: AppState, reader: TextIO, writer: TextIO) -> int:
    """Process ``reader`` until EOF. Returns the number of lines written.

    The refresher keeps ticking while the pipeline waits for input.
    """
    lines = start_line_reader(reader)
    count = 0
    while (line := await lines.get()) is not None:
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        writer.write(process_line(state, line) + "\n")
        writer.flush()
        count += 1
    log.info("pipeline_finished", records=count)
    return count
