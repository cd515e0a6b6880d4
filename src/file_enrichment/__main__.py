"""Entry point: ``python -m file_enrichment`` or the ``file-enrichment`` script."""

from __future__ import annotations

import asyncio
import sys

import structlog
from pydantic import ValidationError

from file_enrichment.config import Settings
from file_enrichment.errors import FatalConfigurationError
from file_enrichment.logging_config import configure_logging
from file_enrichment.pipeline import run_pipeline
from file_enrichment.state import lifespan

log = structlog.get_logger()


async def _serve(settings: Settings) -> None:
    async with lifespan(settings) as state:
        await run_pipeline(state, sys.stdin, sys.stdout)


def main() -> None:
    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.logging)
    try:
        asyncio.run(_serve(settings))
    except FatalConfigurationError as exc:
        log.critical("startup_failed", error=exc.message)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
