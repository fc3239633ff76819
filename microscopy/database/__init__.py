"""Durable history backend (SQLAlchemy)."""
from .engine import DB_PATH, get_engine, get_session_factory, init_db
from .models import Base, HistoryRecord
from .repository import SqlHistoryStore, insert_history_entry, load_history_entries

__all__ = [
    "DB_PATH",
    "get_engine",
    "get_session_factory",
    "init_db",
    "Base",
    "HistoryRecord",
    "SqlHistoryStore",
    "insert_history_entry",
    "load_history_entries",
]
