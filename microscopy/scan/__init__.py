"""Scan sources: the contract, the mock generator, and a timeout wrapper."""
from .base import ScanSource, TimedScanSource
from .mock_source import MockScanSource

__all__ = ["ScanSource", "TimedScanSource", "MockScanSource"]
