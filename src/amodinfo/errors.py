"""amodinfo exception hierarchy.

All amodinfo-specific exceptions inherit from AmodinfoError,
so callers can catch data and configuration failures in one clause.
"""

from __future__ import annotations

from enum import Enum


class AmodinfoError(Exception):
    """Base exception for all amodinfo errors."""


class ParseErrorKind(Enum):
    BAD_FIRST_LINE = "bad first line"
    BAD_LAST_LINE = "bad last line"
    MISSING_NAME = "no <name> element"
    UNTERMINATED_NAME = "<name> element not terminated"
    BAD_NAME_TERMINATOR = "bad <name> terminator"
    UNTERMINATED_JSON = "<json> element not terminated"
    CORRUPT_DATA = "corrupt data"
    UNSORTED = "<name> elements not sorted"


class ParseError(AmodinfoError):
    """Structural violation of the module-info document format.

    Always fatal to index construction; there is no partial index.
    """

    def __init__(self, kind: ParseErrorKind, lineno: int) -> None:
        super().__init__(f"{lineno}: {kind.value}")
        self.kind = kind
        self.lineno = lineno


class DecodeError(AmodinfoError):
    """A single module payload is not valid JSON or does not match the schema."""

    def __init__(
        self, message: str = "", *, name: str | None = None, lineno: int | None = None
    ) -> None:
        prefix = f"{lineno}: " if lineno is not None else ""
        super().__init__(f"{prefix}bad JSON: {message}")
        self.name = name
        self.lineno = lineno


class ConfigError(AmodinfoError):
    """Invalid or missing configuration."""
