"""Dictionary file parsing.

The format is one entry per line::

    FR:{"capital":"Paris","currency":{"name":"Euro","abbreviation":"EUR"}}
    GB:{"capital":"London","currency":{"name":"Pound","abbreviation":"GBP"}}

Each line is split on the first occurrence of the separator. The key is
trimmed, the remainder is trimmed and decoded as JSON. Any bad line aborts the
whole parse so that a half-written file never produces a partial dictionary.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from file_enrichment.errors import MalformedLineError, ValueParseError

_BOM = b"\xef\xbb\xbf"


def fingerprint(raw: bytes) -> str:
    """SHA-256 hex digest of the raw dictionary bytes."""
    return hashlib.sha256(raw).hexdigest()


def parse_dictionary(raw: bytes, separator: str = ":") -> dict[str, Any]:
    """Parse raw dictionary bytes into a key -> JSON value mapping.

    Raises ``MalformedLineError`` for a line without the separator (or with an
    empty key) and ``ValueParseError`` for a value that is not valid JSON.
    Later duplicates of a key overwrite earlier ones.
    """
    if raw.startswith(_BOM):
        raw = raw[len(_BOM) :]

    entries: dict[str, Any] = {}
    for line_number, raw_line in enumerate(raw.split(b"\n"), start=1):
        try:
            line = raw_line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueParseError(line_number, f"invalid UTF-8: {exc.reason}") from exc

        if not line.strip():
            continue

        key, sep, value_text = line.partition(separator)
        key = key.strip()
        if not sep or not key:
            raise MalformedLineError(line_number, separator)

        try:
            entries[key] = json.loads(value_text.strip())
        except json.JSONDecodeError as exc:
            raise ValueParseError(line_number, exc.msg) from exc

    return entries
