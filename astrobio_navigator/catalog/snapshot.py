# astrobio_navigator/catalog/snapshot.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Optional, Tuple

from astrobio_navigator.models.paper import CatalogEntry


class CatalogSnapshot:
    """
    Immutable, in-memory view of the paper catalog.

    A snapshot is loaded once (at app startup or per CLI run) and passed
    explicitly to whatever needs it. Safe to share between threads: nothing
    mutates it after construction.
    """

    def __init__(
        self,
        entries: Iterable[CatalogEntry],
        *,
        source: str = "memory",
        loaded_at: Optional[datetime] = None,
    ) -> None:
        self._entries: Tuple[CatalogEntry, ...] = tuple(entries)
        self._by_id = {entry.id: entry for entry in self._entries}
        self.source = source
        self.loaded_at = loaded_at or datetime.now(timezone.utc)

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def get(self, paper_id: str) -> Optional[CatalogEntry]:
        return self._by_id.get(paper_id)

    def search(self, query: str) -> List[CatalogEntry]:
        """
        Case-insensitive substring search over title, content and id.

        A blank query matches every entry.
        """
        if not query.strip():
            return list(self._entries)

        needle = query.lower()
        return [
            entry
            for entry in self._entries
            if needle in entry.title.lower()
            or needle in entry.content.lower()
            or needle in entry.id.lower()
        ]
