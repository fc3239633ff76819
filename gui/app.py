"""Main GUI application object.

Front-ends (the Streamlit app, tests) talk to `MicroscopyApp` instead of the
controller directly: it forwards user intents and turns every session error
into a non-blocking notice, so no error ever escapes into the view.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from gui.services.export_service import export_to_file
from gui.state import AppState
from gui.utils.logging import log
from microscopy.errors import (
    AcquisitionError,
    EmptyName,
    InvalidResult,
    MicroscopyError,
    NoActiveResult,
    NotFound,
    ScanInProgress,
)
from microscopy.models.schemas import AnalysisResult, HistoryEntry
from microscopy.session.controller import Page, SessionController

# (notice level, message prefix) per error type; the prefix is followed by
# the error text where that helps the user.
ERROR_NOTICES = {
    NoActiveResult: ("warning", "Please perform a scan before saving."),
    EmptyName: ("warning", "Enter a name for this sample."),
    AcquisitionError: ("error", "Scan failed: {error}"),
    InvalidResult: ("error", "Scan returned malformed data: {error}"),
    ScanInProgress: ("info", "A scan is already in progress."),
    NotFound: ("warning", "Saved sample not found."),
}


@dataclass
class MicroscopyApp:
    """Presentation facade over one SessionController."""

    controller: SessionController
    state: AppState = field(default_factory=AppState)
    export_dir: Optional[str] = None

    def run(self, splash_seconds: float = 3.0) -> None:
        """Start the session: arm the splash timer."""

        self.controller.schedule_loading(splash_seconds)

    def shutdown(self) -> None:
        self.controller.dispose()

    def switch_view(self, view_name: str) -> bool:
        """Switch the active page (home | about | history)."""

        try:
            self.controller.navigate(view_name)
        except ValueError:
            self.state.push("warning", f"Unknown page: {view_name}")
            return False
        return True

    def dismiss_intro(self) -> None:
        self.controller.acknowledge_intro()

    def scan(self) -> Optional[AnalysisResult]:
        t0 = time.perf_counter()
        try:
            result = self.controller.request_scan()
        except MicroscopyError as e:
            self._notify_error(e)
            return None
        self.state.last_latency_ms = (time.perf_counter() - t0) * 1000
        return result

    def request_save(self) -> bool:
        """Open the save dialog; False (plus a notice) if there is nothing to save."""

        try:
            self.controller.request_save()
        except MicroscopyError as e:
            self._notify_error(e)
            return False
        return True

    def confirm_save(self, name: str) -> Optional[HistoryEntry]:
        workflow = self.controller.save_workflow
        if workflow is None:
            self.state.push("warning", "The save dialog is not open.")
            return None
        try:
            entry = workflow.confirm(name)
        except MicroscopyError as e:
            self._notify_error(e)
            return None
        self.state.push("success", f'Sample "{entry.name}" saved successfully!')
        return entry

    def cancel_save(self) -> None:
        workflow = self.controller.save_workflow
        if workflow is not None:
            workflow.cancel()

    def history(self) -> List[HistoryEntry]:
        return list(self.controller.history.list())

    def select_history(self, entry_id: str) -> bool:
        try:
            self.controller.select_history(entry_id)
        except MicroscopyError as e:
            self._notify_error(e)
            return False
        return True

    def export(self, fmt: str) -> Optional[Path]:
        result = self.controller.current_result
        if result is None:
            self.state.push("warning", "Please perform a scan before exporting.")
            return None
        if not self.export_dir:
            self.state.push("warning", "No export directory configured.")
            return None
        try:
            path = export_to_file(result, fmt, self.export_dir)
        except (ValueError, RuntimeError, OSError) as e:
            log(f"Export failed: {e}", logging.ERROR, fmt=fmt, result=result.id)
            self.state.push("error", f"Export failed: {e}")
            return None
        self.state.push("success", f"Exported report to {path}")
        return path

    @property
    def active_page(self) -> Page:
        return self.controller.active_page

    def _notify_error(self, error: MicroscopyError) -> None:
        level, template = "error", "{error}"
        for error_type, notice in ERROR_NOTICES.items():
            if isinstance(error, error_type):
                level, template = notice
                break
        log_level = logging.ERROR if level == "error" else logging.WARNING
        log(f"{type(error).__name__}: {error}", log_level, page=self.active_page.value)
        self.state.push(level, template.format(error=error))


class SessionRegistry:
    """Live MicroscopyApp per front-end session id.

    Front-ends have no reliable session-end callback, so the registry shuts an
    app down when its slot is replaced or when ``reap`` finds its session gone.
    """

    def __init__(self):
        self._apps: Dict[str, MicroscopyApp] = {}
        self._lock = threading.Lock()

    def register(self, session_id: str, app: MicroscopyApp) -> None:
        with self._lock:
            previous = self._apps.get(session_id)
            self._apps[session_id] = app
        if previous is not None and previous is not app:
            previous.shutdown()

    def reap(self, is_active: Callable[[str], bool]) -> int:
        """Shut down apps whose session is no longer active; return how many."""
        with self._lock:
            stale = [sid for sid in self._apps if not is_active(sid)]
            apps = [self._apps.pop(sid) for sid in stale]
        for app in apps:
            app.shutdown()
        if apps:
            log(f"Released {len(apps)} ended session(s)")
        return len(apps)

    def __len__(self) -> int:
        with self._lock:
            return len(self._apps)
