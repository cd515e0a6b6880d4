"""Integration test fixtures.

The CLI runs as a real subprocess. Its environment is scrubbed of any
FILE_ENRICHMENT__ variables and its config dir points into tmp_path so a
developer's own configuration can't leak into the tests.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def subprocess_env(tmp_path: Path, dictionary_path: Path) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if not k.startswith("FILE_ENRICHMENT__")}
    env["XDG_CONFIG_HOME"] = str(tmp_path / "config")
    env["FILE_ENRICHMENT__ENRICHMENT__FIELD"] = "data"
    env["FILE_ENRICHMENT__ENRICHMENT__DICTIONARY_PATH"] = str(dictionary_path)
    env["FILE_ENRICHMENT__LOGGING__FORMAT"] = "json"
    return env
