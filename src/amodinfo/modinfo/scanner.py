"""Split a module-info document into `(name, payload-span)` entries.

The document is one JSON object wrapping every module:

    {
      "name1": { ...module JSON object... },
      "name2": { ...module JSON object... }
    }

Payloads are located, never parsed: decoding is deferred to lookup time.
Two strategies are available. "scan" depends only on delimiter characters
and tolerates indentation drift or entries spanning several lines; "lines"
is the strict one-entry-per-line reading of the format. Both yield the same
entries for well-formed input.
"""

from __future__ import annotations

import re
from enum import Enum

from amodinfo.errors import ParseError, ParseErrorKind
from amodinfo.modinfo.types import Entry

STRATEGIES = ("scan", "lines")
DEFAULT_STRATEGY = "scan"

_JSON_TOKEN_RE = re.compile(r'[{}"]')
_STRING_END_RE = re.compile(r'["\\]')
_SEPARATOR_CHARS = frozenset(" \t\r\n,")
_TERMINATOR_CHARS = frozenset(" \t\r\n")


class _State(Enum):
    BEFORE_NAME = "before-name"
    IN_NAME = "in-name"
    BEFORE_JSON = "before-json"
    IN_JSON = "in-json"


def _lineno_at(document: str, offset: int) -> int:
    return document.count("\n", 0, offset) + 1


def _body_span(document: str) -> tuple[int, int]:
    """Validate the wrapper lines and return the `[start, end)` span between them."""
    if not document.startswith("{\n"):
        raise ParseError(ParseErrorKind.BAD_FIRST_LINE, 1)
    end = len(document)
    if document.endswith("\n"):
        end -= 1
    last_newline = document.rfind("\n", 0, end)
    if last_newline < 1 or document[last_newline + 1 : end] != "}":
        raise ParseError(ParseErrorKind.BAD_LAST_LINE, _lineno_at(document, end))
    return 2, last_newline + 1


class _Scanner:
    """Delimiter-driven state machine over the document body."""

    def __init__(self, document: str, start: int, end: int) -> None:
        self.document = document
        self.start = start
        self.end = end
        self.state = _State.BEFORE_NAME
        # Newlines are counted incrementally from `_counted_to`.
        self._lineno = _lineno_at(document, start)
        self._counted_to = start

    def _line(self, offset: int) -> int:
        assert offset >= self._counted_to, "scanner offsets must not move backwards"
        self._lineno += self.document.count("\n", self._counted_to, offset)
        self._counted_to = offset
        return self._lineno

    def _fail(self, kind: ParseErrorKind, offset: int) -> ParseError:
        return ParseError(kind, self._line(min(offset, self.end)))

    def _match_brace(self, start: int) -> int:
        """Return the offset just past the `}` closing the `{` at `start`.

        Braces inside JSON string literals do not count.
        """
        doc = self.document
        depth = 0
        pos = start
        while True:
            token = _JSON_TOKEN_RE.search(doc, pos, self.end)
            if token is None:
                raise self._fail(ParseErrorKind.UNTERMINATED_JSON, start)
            char = token.group()
            pos = token.end()
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return pos
            else:
                pos = self._skip_string(pos)
                if pos == -1:
                    raise self._fail(ParseErrorKind.UNTERMINATED_JSON, start)

    def _skip_string(self, pos: int) -> int:
        doc = self.document
        while True:
            stop = _STRING_END_RE.search(doc, pos, self.end)
            if stop is None:
                return -1
            if stop.group() == '"':
                return stop.end()
            # skip the escaped character
            pos = stop.end() + 1

    def run(self) -> list[Entry]:
        doc = self.document
        entries: list[Entry] = []
        pos = self.start
        name_start = name_end = json_start = -1
        last_offset = -1
        while pos < self.end:
            if self.state is _State.BEFORE_NAME:
                while pos < self.end and doc[pos] in _SEPARATOR_CHARS:
                    pos += 1
                if pos == self.end:
                    break
                if doc[pos] != '"':
                    raise self._fail(ParseErrorKind.MISSING_NAME, pos)
                name_start = pos + 1
                pos = name_start
                self.state = _State.IN_NAME
            elif self.state is _State.IN_NAME:
                quote = doc.find('"', pos, self.end)
                if quote == -1 or doc.find("\n", pos, quote) != -1:
                    raise self._fail(ParseErrorKind.UNTERMINATED_NAME, pos)
                name_end = quote
                pos = quote + 1
                self.state = _State.BEFORE_JSON
            elif self.state is _State.BEFORE_JSON:
                seen_colon = False
                while pos < self.end and doc[pos] != "{":
                    char = doc[pos]
                    if char == ":" and not seen_colon:
                        seen_colon = True
                    elif char not in _TERMINATOR_CHARS:
                        raise self._fail(ParseErrorKind.BAD_NAME_TERMINATOR, pos)
                    pos += 1
                if pos == self.end or not seen_colon:
                    raise self._fail(ParseErrorKind.BAD_NAME_TERMINATOR, pos)
                json_start = pos
                self.state = _State.IN_JSON
            else:
                pos = self._match_brace(json_start)
                assert name_start > last_offset and name_end < json_start < pos, (
                    "entry offsets must be strictly increasing"
                )
                last_offset = pos
                entries.append(
                    Entry(
                        name=doc[name_start:name_end],
                        start=json_start,
                        end=pos,
                        lineno=self._line(json_start),
                    )
                )
                self.state = _State.BEFORE_NAME
        if self.state is not _State.BEFORE_NAME:
            raise self._fail(ParseErrorKind.CORRUPT_DATA, self.end)
        return entries


def _scan(document: str, start: int, end: int) -> list[Entry]:
    return _Scanner(document, start, end).run()


def _split_lines(document: str, start: int, end: int) -> list[Entry]:
    """Strict reading: exactly one `  "NAME": { ... }[,]` entry per line."""
    entries: list[Entry] = []
    lineno = 1
    pos = start
    while pos < end:
        lineno += 1
        newline = document.find("\n", pos, end)
        line_end = end if newline == -1 else newline
        if not document.startswith('  "', pos, line_end):
            raise ParseError(ParseErrorKind.MISSING_NAME, lineno)
        name_start = pos + 3
        name_end = document.find('"', name_start, line_end)
        if name_end == -1:
            raise ParseError(ParseErrorKind.UNTERMINATED_NAME, lineno)
        if not document.startswith('": {', name_end, line_end):
            raise ParseError(ParseErrorKind.BAD_NAME_TERMINATOR, lineno)
        json_start = name_end + 3
        json_end = line_end
        if document.endswith(",", json_start, json_end):
            json_end -= 1
        if not document.endswith("}", json_start, json_end):
            raise ParseError(ParseErrorKind.UNTERMINATED_JSON, lineno)
        entries.append(
            Entry(
                name=document[name_start:name_end],
                start=json_start,
                end=json_end,
                lineno=lineno,
            )
        )
        pos = line_end + 1
    return entries


def build_index(document: str, *, strategy: str = DEFAULT_STRATEGY) -> list[Entry]:
    """Split `document` into entries in document order.

    Raises ParseError with the 1-based line number of the first structural
    violation. Payload contents are not validated here.
    """
    start, end = _body_span(document)
    if strategy == "scan":
        return _scan(document, start, end)
    if strategy == "lines":
        return _split_lines(document, start, end)
    raise ValueError(f"unknown scan strategy {strategy!r} (known: {', '.join(STRATEGIES)})")
