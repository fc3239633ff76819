"""
Microscopy - Scan Session Dashboard

Simulated on-site analysis of marine microorganism samples: trigger a scan,
review the species breakdown, and keep named results in a history log.
"""

__version__ = "1.0.0"

from .errors import (
    AcquisitionError,
    EmptyName,
    InvalidResult,
    MicroscopyError,
    NoActiveResult,
    NotFound,
    PersistenceError,
    SaveWorkflowClosed,
    ScanInProgress,
)
from .models import AnalysisResult, HistoryEntry
from .session import HistoryStore, SaveWorkflow, SessionController

__all__ = [
    "AcquisitionError",
    "AnalysisResult",
    "EmptyName",
    "HistoryEntry",
    "HistoryStore",
    "InvalidResult",
    "MicroscopyError",
    "NoActiveResult",
    "NotFound",
    "PersistenceError",
    "SaveWorkflow",
    "SaveWorkflowClosed",
    "ScanInProgress",
    "SessionController",
]
