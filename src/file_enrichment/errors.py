"""Error taxonomy.

Only ``FatalConfigurationError`` is allowed to escape startup. Everything
else is caught at its boundary (per refresh tick, per record) and logged.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    MALFORMED_LINE = "MALFORMED_LINE"
    INVALID_VALUE = "INVALID_VALUE"
    FILE_MISSING = "FILE_MISSING"
    FATAL_CONFIGURATION = "FATAL_CONFIGURATION"
    NOT_INITIALIZED = "NOT_INITIALIZED"


class FileEnrichmentError(Exception):
    def __init__(self, code: ErrorCode, message: str, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable


class DictionaryParseError(FileEnrichmentError):
    """A dictionary line could not be parsed. Aborts the whole parse."""

    def __init__(self, code: ErrorCode, line: int, message: str) -> None:
        super().__init__(code, f"line {line}: {message}", recoverable=True)
        self.line = line


class MalformedLineError(DictionaryParseError):
    def __init__(self, line: int, separator: str) -> None:
        super().__init__(
            ErrorCode.MALFORMED_LINE,
            line,
            f"expected KEY{separator}VALUE with a non-empty key",
        )
        self.separator = separator


class ValueParseError(DictionaryParseError):
    def __init__(self, line: int, reason: str) -> None:
        super().__init__(ErrorCode.INVALID_VALUE, line, f"value is not valid JSON ({reason})")
        self.reason = reason


class FileMissingError(FileEnrichmentError):
    def __init__(self, path: str) -> None:
        super().__init__(
            ErrorCode.FILE_MISSING, f"dictionary file not found: {path}", recoverable=True
        )
        self.path = path


class FatalConfigurationError(FileEnrichmentError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.FATAL_CONFIGURATION, message, recoverable=False)


class StoreNotInitializedError(FileEnrichmentError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.NOT_INITIALIZED, "dictionary store has not been initialized")
