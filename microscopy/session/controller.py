"""Session controller: the scan-session and history state machine.

Owns the single current result plus the app/page state, and mediates every
scan, save and replay request. View layers read ``snapshot()``; they never
get a mutable handle on the controller's state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from microscopy.errors import AcquisitionError, InvalidResult, NoActiveResult, ScanInProgress
from microscopy.models.schemas import AnalysisResult, HistoryEntry, validate_result
from microscopy.processing.statistics import DerivedStatistics, compute_statistics
from microscopy.scan.base import ScanSource
from microscopy.session.history_store import HistoryStore
from microscopy.session.save_workflow import SaveWorkflow
from microscopy.session.timer import OneShotTimer, Scheduler, thread_scheduler
from microscopy.utils.logger import get_logger

logger = get_logger(__name__)


class AppPhase(str, Enum):
    LOADING = "loading"
    READY = "ready"


class Page(str, Enum):
    HOME = "home"
    ABOUT = "about"
    HISTORY = "history"


class HomeSubview(str, Enum):
    WELCOME = "welcome"
    AWAITING_SCAN = "awaiting_scan"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of everything the presentation layer renders."""

    app_phase: AppPhase
    active_page: Page
    home_subview: HomeSubview
    current_result: Optional[AnalysisResult]
    statistics: Optional[DerivedStatistics]
    history_size: int
    saving: bool
    scan_in_progress: bool


class SessionController:
    """State machine for one dashboard session.

    Args:
        scan_source: produces results on request_scan()
        history: history log shared with the save workflow
        scheduler: creates the splash timer; injectable for tests and UIs
            with their own event loop
    """

    def __init__(
        self,
        scan_source: ScanSource,
        history: Optional[HistoryStore] = None,
        scheduler: Scheduler = thread_scheduler,
    ):
        self.scan_source = scan_source
        self.history = history if history is not None else HistoryStore()
        self._scheduler = scheduler

        self._state_lock = threading.RLock()
        self._scan_lock = threading.Lock()

        self._app_phase = AppPhase.LOADING
        self._active_page = Page.HOME
        self._intro_acknowledged = False
        self._current: Optional[AnalysisResult] = None
        self._save_workflow: Optional[SaveWorkflow] = None
        self._loading_timer: Optional[OneShotTimer] = None
        self._disposed = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def app_phase(self) -> AppPhase:
        return self._app_phase

    @property
    def active_page(self) -> Page:
        return self._active_page

    @property
    def current_result(self) -> Optional[AnalysisResult]:
        return self._current

    @property
    def intro_acknowledged(self) -> bool:
        return self._intro_acknowledged

    @property
    def home_subview(self) -> HomeSubview:
        with self._state_lock:
            if self._current is not None:
                return HomeSubview.DASHBOARD
            if not self._intro_acknowledged:
                return HomeSubview.WELCOME
            return HomeSubview.AWAITING_SCAN

    @property
    def save_workflow(self) -> Optional[SaveWorkflow]:
        """The open save workflow, if any."""
        return self._save_workflow

    @property
    def disposed(self) -> bool:
        return self._disposed

    def statistics(self) -> Optional[DerivedStatistics]:
        current = self._current
        return compute_statistics(current) if current is not None else None

    def snapshot(self) -> SessionSnapshot:
        with self._state_lock:
            return SessionSnapshot(
                app_phase=self._app_phase,
                active_page=self._active_page,
                home_subview=self.home_subview,
                current_result=self._current,
                statistics=self.statistics(),
                history_size=len(self.history),
                saving=self._save_workflow is not None,
                scan_in_progress=self._scan_lock.locked(),
            )

    # ------------------------------------------------------------------
    # Loading phase
    # ------------------------------------------------------------------

    def schedule_loading(self, delay: float) -> None:
        """Arm the splash timer; re-arming replaces any pending timer."""
        with self._state_lock:
            if self._disposed or self._app_phase is AppPhase.READY:
                return
            if self._loading_timer is not None:
                self._loading_timer.cancel()
            self._loading_timer = OneShotTimer(delay, self.finish_loading, self._scheduler)

    def finish_loading(self) -> None:
        with self._state_lock:
            if self._disposed:
                logger.debug("Ignoring loading completion after dispose")
                return
            if self._app_phase is AppPhase.READY:
                return
            self._app_phase = AppPhase.READY
            self._loading_timer = None
        logger.info("Session ready")

    def dispose(self) -> None:
        """Tear down: cancel the splash timer and ignore late callbacks."""
        with self._state_lock:
            self._disposed = True
            timer, self._loading_timer = self._loading_timer, None
        if timer is not None:
            timer.cancel()

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------

    def acknowledge_intro(self) -> None:
        with self._state_lock:
            self._intro_acknowledged = True

    def navigate(self, page: Union[Page, str]) -> Page:
        target = Page(page)
        with self._state_lock:
            self._active_page = target
        return target

    def request_scan(self) -> AnalysisResult:
        """Acquire a new result and make it current.

        Only one acquisition runs at a time; a concurrent call raises
        ScanInProgress. On AcquisitionError or InvalidResult the current
        result is left as it was.
        """
        if not self._scan_lock.acquire(blocking=False):
            raise ScanInProgress("A scan is already in progress")
        try:
            try:
                result = validate_result(self.scan_source.produce())
            except (AcquisitionError, InvalidResult) as exc:
                logger.warning("Scan failed: %s", exc)
                raise
            with self._state_lock:
                previous = self._current
                self._current = result
                self._intro_acknowledged = True
            if previous is not None:
                logger.debug("Replaced current result %s with %s", previous.id, result.id)
            logger.info("Scan complete: %s", result.id)
            return result
        finally:
            self._scan_lock.release()

    def request_save(self) -> SaveWorkflow:
        with self._state_lock:
            if self._current is None:
                raise NoActiveResult("Please perform a scan before saving.")
            if self._save_workflow is None:
                self._save_workflow = SaveWorkflow(
                    self.history,
                    result_provider=lambda: self._current,
                    on_close=self._workflow_closed,
                )
            return self._save_workflow

    def select_history(self, entry_id: str) -> AnalysisResult:
        """Replay a saved entry into the dashboard."""
        entry: HistoryEntry = self.history.find(entry_id)
        replay = entry.snapshot.model_copy(deep=True)
        with self._state_lock:
            self._current = replay
            self._intro_acknowledged = True
            self._active_page = Page.HOME
        logger.info("Replayed history entry %s (%s)", entry.id, entry.name)
        return replay

    def _workflow_closed(self, workflow: SaveWorkflow) -> None:
        with self._state_lock:
            if self._save_workflow is workflow:
                self._save_workflow = None
