"""GUI-side logging.

Records go to the ``microscopy.gui`` logger so they share the handlers set up
by ``microscopy.utils.logger.setup_logging``; nothing here configures logging.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("microscopy.gui")


def log(message: str, level: int = logging.INFO, **context) -> None:
    """Log a UI event, appending ``key=value`` context (page, result id, ...)."""
    if context:
        details = " ".join(f"{k}={v}" for k, v in sorted(context.items()))
        message = f"{message} [{details}]"
    logger.log(level, message)
