from .clients import get_history_store, get_scan_source, get_session_controller
from .export_service import (
    EXPORT_FORMATS,
    build_excel_bytes,
    build_pdf_bytes,
    export_json,
    export_to_file,
)
from .stats_service import DistributionRow, StatsService

__all__ = [
    "get_history_store",
    "get_scan_source",
    "get_session_controller",
    "EXPORT_FORMATS",
    "build_excel_bytes",
    "build_pdf_bytes",
    "export_json",
    "export_to_file",
    "DistributionRow",
    "StatsService",
]
