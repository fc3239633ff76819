"""Durable history: SQLAlchemy-backed write-through history store.

The in-memory HistoryStore stays the source of truth for reads; this module
loads it from the database at startup and writes every append through
before it becomes visible.
"""
from typing import List

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from microscopy.errors import InvalidResult, PersistenceError
from microscopy.models.schemas import AnalysisResult, HistoryEntry
from microscopy.session.history_store import HistoryStore
from microscopy.utils.logger import get_logger

from .models import HistoryRecord

logger = get_logger(__name__)


def insert_history_entry(session: Session, entry: HistoryEntry) -> HistoryRecord:
    """Persist one entry and return the stored row."""
    record = HistoryRecord(
        entry_id=entry.id,
        name=entry.name,
        saved_at=entry.saved_at,
        scan_id=entry.snapshot.id,
        snapshot=entry.snapshot.to_payload(),
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def load_history_entries(session: Session) -> List[HistoryEntry]:
    """Return all stored entries, most recent first."""
    rows = session.query(HistoryRecord).order_by(HistoryRecord.seq.desc()).all()
    return [
        HistoryEntry(
            id=row.entry_id,
            name=row.name,
            saved_at=row.saved_at,
            snapshot=AnalysisResult.from_payload(row.snapshot),
        )
        for row in rows
    ]


class SqlHistoryStore(HistoryStore):
    """HistoryStore that writes through to a database.

    Call ``load()`` once at startup. A failed write raises PersistenceError
    and the entry does not appear in memory.
    """

    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self._session_factory = session_factory

    def load(self) -> List[HistoryEntry]:
        db = self._session_factory()
        try:
            entries = load_history_entries(db)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load history: {exc}") from exc
        except (InvalidResult, ValidationError) as exc:
            raise PersistenceError(f"Stored history entry is corrupt: {exc}") from exc
        finally:
            db.close()

        with self._lock:
            self._entries.clear()
            # Stored newest-first; rebuild the deque in the same order.
            self._entries.extend(entries)
        logger.info("Loaded %d history entries", len(entries))
        return entries

    def append(self, entry: HistoryEntry) -> HistoryEntry:
        if not isinstance(entry, HistoryEntry):
            raise TypeError(f"Expected HistoryEntry, got {type(entry).__name__}")
        # Held across the insert so row order (seq) matches in-memory order.
        with self._lock:
            db = self._session_factory()
            try:
                insert_history_entry(db, entry)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("History write failed for %s: %s", entry.id, exc)
                raise PersistenceError(f"Could not save history entry: {exc}") from exc
            finally:
                db.close()
            return super().append(entry)
