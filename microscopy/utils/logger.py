"""Logging setup shared by the session core and the front-end.

    from microscopy.utils.logger import get_logger
    logger = get_logger(__name__)

``setup_logging`` is called once by the entry point with the configured level;
library modules only ask for loggers.
"""
import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are too chatty at INFO for a bench dashboard.
QUIET_LOGGERS = ("sqlalchemy.engine", "watchdog", "PIL")


def _resolve_level(level) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv("MICROSCOPY_LOG_LEVEL") or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level=None) -> None:
    resolved = _resolve_level(level)
    root = logging.getLogger()
    if root.handlers:
        # Streamlit reruns the script; only adjust the level on later calls.
        root.setLevel(resolved)
    else:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
