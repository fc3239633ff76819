from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class HistoryRecord(Base):
    """Durable copy of a saved history entry.

    ``seq`` preserves save order; the snapshot is stored as the result's
    camelCase JSON payload.
    """

    __tablename__ = "history_entries"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    saved_at = Column(DateTime(timezone=True), nullable=False)
    scan_id = Column(String, nullable=False)
    snapshot = Column(JSON, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - repr utility
        return f"HistoryRecord(entry_id={self.entry_id}, name={self.name})"
