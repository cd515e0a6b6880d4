"""Unit tests for file_enrichment.parser.

Covers:
- Well-formed dictionaries: separators, whitespace, blank lines, duplicates
- Whole-parse failure on malformed lines and invalid JSON, with line numbers
- Content fingerprints
"""

from __future__ import annotations

import hashlib

import pytest

from file_enrichment.errors import (
    DictionaryParseError,
    ErrorCode,
    MalformedLineError,
    ValueParseError,
)
from file_enrichment.parser import fingerprint, parse_dictionary

# ---------------------------------------------------------------------------
# Well-formed input
# ---------------------------------------------------------------------------


class TestParseDictionary:
    def test_parses_json_values(self) -> None:
        """Nested JSON objects are decoded per key."""
        raw = (
            b'FR:{"capital":"Paris","currency":{"name":"Euro","abbreviation":"EUR"}}\n'
            b'GB:{"capital":"London","currency":{"name":"Pound","abbreviation":"GBP"}}\n'
        )
        result = parse_dictionary(raw)
        assert set(result) == {"FR", "GB"}
        assert result["FR"]["capital"] == "Paris"
        assert result["GB"]["currency"] == {"name": "Pound", "abbreviation": "GBP"}

    def test_scalar_and_array_values(self) -> None:
        """Values need not be objects; any JSON value is accepted."""
        raw = b'n:42\nf:1.5\ns:"text"\nt:true\nz:null\na:[1,"two",{"three":3}]\n'
        assert parse_dictionary(raw) == {
            "n": 42,
            "f": 1.5,
            "s": "text",
            "t": True,
            "z": None,
            "a": [1, "two", {"three": 3}],
        }

    def test_splits_on_first_separator_only(self) -> None:
        """Separators inside the value are left alone."""
        result = parse_dictionary(b'url:{"href":"http://example.com:8080/"}\n')
        assert result == {"url": {"href": "http://example.com:8080/"}}

    def test_whitespace_around_key_and_value_is_ignored(self) -> None:
        """Surrounding whitespace is trimmed; inner spaces in the key survive."""
        result = parse_dictionary(b'  key one  :   {"a": 1}   \n')
        assert result == {"key one": {"a": 1}}

    def test_missing_trailing_newline(self) -> None:
        assert parse_dictionary(b'A:{"x":1}') == {"A": {"x": 1}}

    def test_blank_lines_are_skipped(self) -> None:
        """Blank and whitespace-only lines are not errors."""
        raw = b'A:{"x":1}\n\n   \nB:{"x":2}\n\n'
        assert parse_dictionary(raw) == {"A": {"x": 1}, "B": {"x": 2}}

    def test_crlf_line_endings(self) -> None:
        raw = b'A:{"x":1}\r\nB:{"x":2}\r\n'
        assert parse_dictionary(raw) == {"A": {"x": 1}, "B": {"x": 2}}

    def test_leading_bom_is_ignored(self) -> None:
        raw = b'\xef\xbb\xbfA:{"x":1}\n'
        assert parse_dictionary(raw) == {"A": {"x": 1}}

    def test_empty_input(self) -> None:
        assert parse_dictionary(b"") == {}

    def test_duplicate_keys_last_write_wins(self) -> None:
        """A repeated key keeps the value from its last line."""
        raw = b'A:{"v":1}\nB:{"v":2}\nA:{"v":3}\n'
        assert parse_dictionary(raw) == {"A": {"v": 3}, "B": {"v": 2}}

    def test_multi_character_separator(self) -> None:
        raw = b'a:b => {"x":1}\n'
        assert parse_dictionary(raw, " => ") == {"a:b": {"x": 1}}

    def test_separator_is_literal_not_regex(self) -> None:
        """Regex metacharacters in the separator match literally."""
        raw = b'A|{"x":1}\n'
        assert parse_dictionary(raw, "|") == {"A": {"x": 1}}

    def test_utf8_keys_and_values(self) -> None:
        raw = 'Zürich:{"land":"Schweiz"}\n'.encode()
        assert parse_dictionary(raw) == {"Zürich": {"land": "Schweiz"}}


# ---------------------------------------------------------------------------
# Failures abort the whole parse
# ---------------------------------------------------------------------------


class TestParseFailures:
    def test_line_without_separator(self) -> None:
        """A line with no separator fails the whole parse with its line number."""
        raw = b'A:{"x":1}\nno separator here\nB:{"x":2}\n'
        with pytest.raises(MalformedLineError) as exc_info:
            parse_dictionary(raw)
        assert exc_info.value.line == 2
        assert exc_info.value.code == ErrorCode.MALFORMED_LINE

    def test_empty_key(self) -> None:
        """A line whose key is blank is malformed."""
        with pytest.raises(MalformedLineError) as exc_info:
            parse_dictionary(b'A:{"x":1}\n  :{"x":2}\n')
        assert exc_info.value.line == 2

    def test_invalid_json_value(self) -> None:
        """An unparsable value fails the whole parse."""
        raw = b'A:{"field1":"valueA1","field2","valueA2"}\n'
        with pytest.raises(ValueParseError) as exc_info:
            parse_dictionary(raw)
        assert exc_info.value.line == 1
        assert exc_info.value.code == ErrorCode.INVALID_VALUE

    def test_empty_value_is_invalid(self) -> None:
        with pytest.raises(ValueParseError):
            parse_dictionary(b"A:\n")

    def test_line_numbers_count_blank_lines(self) -> None:
        """Reported line numbers match the file, blank lines included."""
        with pytest.raises(ValueParseError) as exc_info:
            parse_dictionary(b'A:{"x":1}\n\nB:{oops}\n')
        assert exc_info.value.line == 3

    def test_invalid_utf8(self) -> None:
        """Undecodable bytes are reported against their line."""
        with pytest.raises(ValueParseError) as exc_info:
            parse_dictionary(b'A:{"x":1}\nB:"\xff\xfe"\n')
        assert exc_info.value.line == 2

    def test_errors_share_base_class(self) -> None:
        for raw in (b"broken\n", b"A:{\n"):
            with pytest.raises(DictionaryParseError) as exc_info:
                parse_dictionary(raw)
            assert exc_info.value.recoverable is True


# ---------------------------------------------------------------------------
# fingerprint
# ---------------------------------------------------------------------------


class TestFingerprint:
    def test_is_sha256_hex(self) -> None:
        assert fingerprint(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_changes_with_content(self) -> None:
        assert fingerprint(b'A:{"x":1}\n') != fingerprint(b'A:{"x":2}\n')

    def test_stable_for_same_content(self) -> None:
        assert fingerprint(b'A:{"x":1}\n') == fingerprint(b'A:{"x":1}\n')
