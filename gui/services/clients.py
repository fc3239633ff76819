"""Factories that wire the session core from settings."""

from __future__ import annotations

from typing import Optional

from microscopy.config import Settings, get_settings
from microscopy.database import SqlHistoryStore, get_engine, get_session_factory, init_db
from microscopy.scan import MockScanSource, ScanSource, TimedScanSource
from microscopy.session import HistoryStore, SessionController
from microscopy.session.timer import Scheduler, thread_scheduler


def get_scan_source(settings: Optional[Settings] = None) -> ScanSource:
    """Return the configured scan source (mock, optionally with a timeout)."""

    settings = settings or get_settings()
    source: ScanSource = MockScanSource(
        seed=settings.mock_seed,
        location=settings.site_location,
        failure_rate=settings.mock_failure_rate,
    )
    if settings.scan_timeout_seconds:
        source = TimedScanSource(source, settings.scan_timeout_seconds)
    return source


def get_history_store(settings: Optional[Settings] = None) -> HistoryStore:
    """Return an in-memory store, or a loaded SQL store for the sqlite backend."""

    settings = settings or get_settings()
    if settings.history_backend == "sqlite":
        engine = get_engine(settings.database_url)
        init_db(engine)
        store = SqlHistoryStore(get_session_factory(engine))
        store.load()
        return store
    if settings.history_backend != "memory":
        raise ValueError(f"Unknown history backend: {settings.history_backend}")
    return HistoryStore()


def get_session_controller(
    settings: Optional[Settings] = None,
    scheduler: Scheduler = thread_scheduler,
) -> SessionController:
    settings = settings or get_settings()
    return SessionController(
        scan_source=get_scan_source(settings),
        history=get_history_store(settings),
        scheduler=scheduler,
    )
