from __future__ import annotations

import re
from enum import IntEnum
from typing import Dict, Iterable, Iterator

from codemaster.core.catalog import Entry
from codemaster.core.progress import ProgressStore

_WHITESPACE = re.compile(r"\s+")


class DictionaryStatus(IntEnum):
    NEW = 0
    LEARNING = 1
    DONE = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def next(self) -> "DictionaryStatus":
        return DictionaryStatus((self.value + 1) % len(DictionaryStatus))


class CatalogFilter:
    """Lazy view over the entries matching a search query.

    Matching is re-evaluated on every iteration, so the same object can be
    iterated again after the underlying catalog changes.
    """

    def __init__(self, entries: Iterable[Entry], query: str) -> None:
        self._entries = entries
        self._query = query

    @property
    def query(self) -> str:
        return self._query

    def matches(self, entry: Entry) -> bool:
        if self._query.lower() in entry.place.lower():
            return True
        return _WHITESPACE.sub("", self._query) in _WHITESPACE.sub("", entry.code)

    def __iter__(self) -> Iterator[Entry]:
        return (entry for entry in self._entries if self.matches(entry))


class DictionaryTracker:
    """Manual New/Learning/Done tags per code, independent of quiz results."""

    def __init__(self, store: ProgressStore) -> None:
        self._store = store
        self._statuses: Dict[str, int] = store.dictionary_status()

    def status(self, code: str) -> DictionaryStatus:
        return DictionaryStatus(self._statuses.get(code, DictionaryStatus.NEW))

    def cycle_status(self, code: str) -> DictionaryStatus:
        new_status = self.status(code).next()
        self._statuses[code] = int(new_status)
        self._store.set_dictionary_status(self._statuses)
        return new_status

    def statuses(self) -> Dict[str, DictionaryStatus]:
        return {code: DictionaryStatus(value) for code, value in self._statuses.items()}

    def status_counts(self, entries: Iterable[Entry]) -> Dict[DictionaryStatus, int]:
        counts = {status: 0 for status in DictionaryStatus}
        for entry in entries:
            counts[self.status(entry.code)] += 1
        return counts

    def filter_catalog(self, entries: Iterable[Entry], query: str) -> CatalogFilter:
        return CatalogFilter(entries, query)
