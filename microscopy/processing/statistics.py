"""Derived statistics for the species distribution panel.

Each share is rounded independently, half up, the same way the dashboard
has always displayed it. Independent rounding means the percentages can
sum to 99 or 101; that drift is kept as-is rather than corrected with a
largest-remainder pass, since correcting it changes what users see.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from microscopy.models.schemas import AnalysisResult


@dataclass(frozen=True)
class SpeciesShare:
    name: str
    count: int
    percentage: int


@dataclass(frozen=True)
class DerivedStatistics:
    total: int
    shares: Tuple[SpeciesShare, ...]

    @property
    def percentage_sum(self) -> int:
        return sum(s.percentage for s in self.shares)

    def share_for(self, name: str) -> SpeciesShare:
        for share in self.shares:
            if share.name == name:
                return share
        raise KeyError(name)


def round_half_up_percentage(count: int, total: int) -> int:
    """round(100 * count / total) with halves rounded up, in integer math."""
    if total <= 0:
        return 0
    return (200 * count + total) // (2 * total)


def compute_statistics(result: AnalysisResult) -> DerivedStatistics:
    """Totals and per-species percentages for one result.

    An empty scan (total == 0) yields 0% for every species.
    """
    total = sum(s.count for s in result.species_distribution)
    shares = tuple(
        SpeciesShare(
            name=s.name,
            count=s.count,
            percentage=round_half_up_percentage(s.count, total),
        )
        for s in result.species_distribution
    )
    return DerivedStatistics(total=total, shares=shares)
