"""Save workflow: name the current result and commit it to history."""

from __future__ import annotations

from typing import Callable, Optional

from microscopy.errors import EmptyName, NoActiveResult, SaveWorkflowClosed
from microscopy.models.schemas import AnalysisResult, HistoryEntry
from microscopy.session.history_store import HistoryStore
from microscopy.utils.logger import get_logger

logger = get_logger(__name__)


class SaveWorkflow:
    """Collects a sample name and appends a HistoryEntry.

    The workflow never changes the current result; it only reads it through
    ``result_provider`` at confirmation time.
    """

    def __init__(
        self,
        history: HistoryStore,
        result_provider: Callable[[], Optional[AnalysisResult]],
        on_close: Optional[Callable[["SaveWorkflow"], None]] = None,
    ):
        self._history = history
        self._result_provider = result_provider
        self._on_close = on_close
        self.candidate_name = ""
        self.is_open = True

    def set_name(self, name: str) -> None:
        self._ensure_open()
        self.candidate_name = name

    def confirm(self, name: Optional[str] = None) -> HistoryEntry:
        """Commit the current result under ``name`` (or the candidate name).

        Raises EmptyName for a blank name and leaves the workflow open so the
        user can correct it.
        """
        self._ensure_open()
        if name is not None:
            self.candidate_name = name
        trimmed = (self.candidate_name or "").strip()
        if not trimmed:
            raise EmptyName("Sample name cannot be empty")

        result = self._result_provider()
        if result is None:
            raise NoActiveResult("No scan result to save")

        entry = HistoryEntry(name=trimmed, snapshot=result.model_copy(deep=True))
        self._history.append(entry)
        self._close()
        return entry

    def cancel(self) -> None:
        if not self.is_open:
            return
        logger.debug("Save workflow cancelled")
        self._close()

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise SaveWorkflowClosed("Save workflow is no longer open")

    def _close(self) -> None:
        self.candidate_name = ""
        self.is_open = False
        if self._on_close is not None:
            self._on_close(self)
