"""Stats service used by the dashboard.

Turns an AnalysisResult plus its derived statistics into display-ready
cards and rows. Works the same for a live scan and a replayed history entry.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Optional

from gui.components.stat_card import StatCard
from microscopy.models.schemas import AnalysisResult
from microscopy.processing.statistics import DerivedStatistics, compute_statistics


@dataclass(frozen=True)
class DistributionRow:
    name: str
    count: int
    percentage: int

    @property
    def label(self) -> str:
        return f"{self.count} ({self.percentage}%)"


class StatsService:
    """Compute dashboard view data for one result.

    One instance is shared by every browser session, so the statistics cache
    holds at most ``max_cached`` entries, least recently used evicted first.
    """

    def __init__(self, max_cached: int = 64):
        if max_cached < 1:
            raise ValueError("max_cached must be at least 1")
        self.max_cached = max_cached
        self._cache: "OrderedDict[str, DerivedStatistics]" = OrderedDict()
        self._lock = threading.Lock()

    def invalidate_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_statistics(self, result: AnalysisResult, *, force_refresh: bool = False) -> DerivedStatistics:
        # Results are immutable, so the id is a safe cache key.
        with self._lock:
            cached = self._cache.get(result.id)
            if cached is not None and not force_refresh:
                self._cache.move_to_end(result.id)
                return cached
        stats = compute_statistics(result)
        with self._lock:
            self._cache[result.id] = stats
            self._cache.move_to_end(result.id)
            while len(self._cache) > self.max_cached:
                self._cache.popitem(last=False)
        return stats

    def summary_cards(self, result: AnalysisResult) -> List[StatCard]:
        return [
            StatCard(
                "Total Organisms Counted",
                str(result.total_organisms),
                "🧪",
                "All organisms detected in the current frame.",
            ),
            StatCard(
                "Unique Species Detected",
                str(result.unique_species_count),
                "📊",
                "Distinct species reported by the classifier.",
            ),
        ]

    def environmental_cards(self, result: AnalysisResult) -> List[StatCard]:
        env = result.environmental
        return [
            StatCard("Location", env.location, "📍"),
            StatCard("Temperature", env.temperature, "🌡️"),
            StatCard(
                "Timestamp",
                env.timestamp_utc.strftime("%Y-%m-%d %H:%M:%S UTC"),
                "🕒",
            ),
        ]

    def distribution_rows(self, result: AnalysisResult) -> List[DistributionRow]:
        stats = self.get_statistics(result)
        return [DistributionRow(s.name, s.count, s.percentage) for s in stats.shares]

    def alert_lines(self, result: AnalysisResult) -> List[str]:
        return [
            f"{a.name} ({a.species}) · Count: {a.count} | Risk Level: {a.risk_level}"
            for a in result.high_risk_alerts
        ]

    def rounding_note(self, result: AnalysisResult) -> Optional[str]:
        """Caption shown when independently rounded shares don't add to 100%."""
        stats = self.get_statistics(result)
        if stats.total == 0 or stats.percentage_sum == 100:
            return None
        return f"Percentages are rounded per species and sum to {stats.percentage_sum}%."
