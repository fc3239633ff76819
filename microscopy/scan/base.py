"""Scan source contract.

A scan source is anything with a ``produce()`` method returning an
AnalysisResult. The mock generator implements it for the demo; a real
instrument + inference pipeline is a drop-in replacement as long as its
output passes AnalysisResult validation.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError
from typing import Optional, Protocol

from microscopy.errors import AcquisitionError
from microscopy.models.schemas import AnalysisResult
from microscopy.utils.logger import get_logger

logger = get_logger(__name__)


class ScanSource(Protocol):
    """Produces a new AnalysisResult on demand.

    Implementations raise AcquisitionError when the instrument is unavailable.
    """

    def produce(self) -> AnalysisResult: ...


class TimedScanSource:
    """Wrap a scan source with an acquisition timeout.

    A produce() call that does not finish within ``timeout_seconds`` raises
    AcquisitionError. The stalled acquisition keeps the single worker busy,
    so later calls queue behind it and time out too until it returns.
    """

    def __init__(self, source: ScanSource, timeout_seconds: float):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.source = source
        self.timeout_seconds = timeout_seconds
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="scan-acquire"
        )

    def produce(self) -> AnalysisResult:
        if self._executor is None:
            raise AcquisitionError("Scan source has been closed")
        future = self._executor.submit(self.source.produce)
        try:
            return future.result(timeout=self.timeout_seconds)
        except TimeoutError as exc:
            logger.error("Acquisition timed out after %.1fs", self.timeout_seconds)
            raise AcquisitionError(
                f"Acquisition timed out after {self.timeout_seconds:g}s"
            ) from exc

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
