"""Append-only history log of saved analysis results.

Entries are kept most-recent-first. The store is memory-resident and lives
for the process; microscopy.database provides a write-through variant.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Iterator

from microscopy.errors import NotFound
from microscopy.models.schemas import HistoryEntry
from microscopy.utils.logger import get_logger

logger = get_logger(__name__)


class HistoryListing:
    """Lazy, restartable view over a history store.

    Each iteration reads the store at that moment, so re-iterating yields the
    same entries unless something was appended in between.
    """

    def __init__(self, store: "HistoryStore"):
        self._store = store

    def __iter__(self) -> Iterator[HistoryEntry]:
        yield from self._store._snapshot()

    def __len__(self) -> int:
        return len(self._store)


class HistoryStore:
    """Thread-safe, in-memory, append-only history log."""

    def __init__(self):
        self._entries: Deque[HistoryEntry] = deque()
        self._lock = threading.RLock()

    def append(self, entry: HistoryEntry) -> HistoryEntry:
        if not isinstance(entry, HistoryEntry):
            raise TypeError(f"Expected HistoryEntry, got {type(entry).__name__}")
        with self._lock:
            self._entries.appendleft(entry)
        logger.info("Saved history entry %s (%s)", entry.id, entry.name)
        return entry

    def list(self) -> HistoryListing:
        return HistoryListing(self)

    def find(self, entry_id: str) -> HistoryEntry:
        # Linear scan; fine for a session-sized log.
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        raise NotFound(f"No history entry with id {entry_id!r}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _snapshot(self) -> tuple:
        with self._lock:
            return tuple(self._entries)
