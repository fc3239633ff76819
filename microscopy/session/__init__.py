"""Scan session state machine, save workflow and history log."""
from .controller import AppPhase, HomeSubview, Page, SessionController, SessionSnapshot
from .history_store import HistoryListing, HistoryStore
from .save_workflow import SaveWorkflow
from .timer import OneShotTimer, thread_scheduler

__all__ = [
    "AppPhase",
    "HomeSubview",
    "Page",
    "SessionController",
    "SessionSnapshot",
    "HistoryListing",
    "HistoryStore",
    "SaveWorkflow",
    "OneShotTimer",
    "thread_scheduler",
]
