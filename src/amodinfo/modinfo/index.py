"""Searchable index over a module-info document."""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Iterator

from amodinfo.errors import DecodeError, ParseError, ParseErrorKind
from amodinfo.modinfo.decoder import DEFAULT_SCHEMA, decode, get_schema
from amodinfo.modinfo.scanner import DEFAULT_STRATEGY, build_index
from amodinfo.modinfo.types import Entry, ModuleRecord

logger = logging.getLogger(__name__)


class ModuleIndex:
    """Immutable index of module entries, looked up by binary search.

    Lookup requires entries sorted by name. With ``presorted=True`` the
    document order is kept and checked: an out-of-order name raises
    ParseError(UNSORTED) at its line. With ``presorted=False`` entries are
    sorted stably by name and ``names()`` reflects sorted order.

    Duplicate names are kept; ``find`` returns the first one in index order.
    """

    __slots__ = ("_document", "_entries", "_names", "_schema")

    def __init__(
        self,
        document: str,
        entries: list[Entry],
        *,
        presorted: bool = True,
        schema: str = DEFAULT_SCHEMA,
    ) -> None:
        get_schema(schema)
        if presorted:
            _check_sorted(entries)
        else:
            entries = sorted(entries, key=lambda entry: entry.name)
        self._document = document
        self._entries = tuple(entries)
        self._names = tuple(entry.name for entry in self._entries)
        self._schema = schema

    @classmethod
    def from_document(
        cls,
        document: str,
        *,
        strategy: str = DEFAULT_STRATEGY,
        presorted: bool = True,
        schema: str = DEFAULT_SCHEMA,
    ) -> ModuleIndex:
        entries = build_index(document, strategy=strategy)
        index = cls(document, entries, presorted=presorted, schema=schema)
        logger.debug(
            "module-info indexed: entries=%d strategy=%s presorted=%s",
            len(index),
            strategy,
            presorted,
        )
        return index

    @property
    def schema(self) -> str:
        return self._schema

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._locate(name) is not None

    def names(self) -> tuple[str, ...]:
        return self._names

    def _locate(self, name: str) -> Entry | None:
        pos = bisect_left(self._names, name)
        if pos < len(self._names) and self._names[pos] == name:
            return self._entries[pos]
        return None

    def payload(self, name: str) -> str | None:
        """Return the raw JSON slice for `name` without decoding it."""
        entry = self._locate(name)
        if entry is None:
            return None
        return entry.payload(self._document)

    def _decode(self, entry: Entry) -> ModuleRecord:
        return decode(
            entry.payload(self._document),
            schema=self._schema,
            name=entry.name,
            lineno=entry.lineno,
        )

    def find(self, name: str) -> ModuleRecord | None:
        """Decode the record for `name`, or return None if it is not indexed.

        Raises DecodeError when the payload is malformed; the index stays
        usable. Records are decoded afresh on every call.
        """
        entry = self._locate(name)
        if entry is None:
            return None
        return self._decode(entry)

    def iter_records(self) -> Iterator[tuple[str, ModuleRecord | DecodeError]]:
        """Yield every entry decoded, with failures returned instead of raised."""
        for entry in self._entries:
            try:
                yield entry.name, self._decode(entry)
            except DecodeError as exc:
                yield entry.name, exc


def _check_sorted(entries: list[Entry]) -> None:
    for previous, current in zip(entries, entries[1:]):
        if current.name < previous.name:
            raise ParseError(ParseErrorKind.UNSORTED, current.lineno)
