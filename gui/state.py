"""Application state container.

Holds presentation-only state: the notices shown to the user and a couple
of status-bar metrics. Session state proper lives in SessionController.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class Notice:
    """A non-blocking message for the user."""

    level: str  # info | success | warning | error
    message: str
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class AppState:
    """Holds ephemeral UI state."""

    notices: List[Notice] = field(default_factory=list)
    last_latency_ms: Optional[float] = None
    max_notices: int = 50

    def push(self, level: str, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        del self.notices[: -self.max_notices]
        return notice

    def drain(self) -> List[Notice]:
        """Return pending notices and clear them."""
        pending, self.notices = self.notices, []
        return pending
