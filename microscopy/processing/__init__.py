"""Read-only computations over analysis results."""
from .statistics import DerivedStatistics, SpeciesShare, compute_statistics

__all__ = ["DerivedStatistics", "SpeciesShare", "compute_statistics"]
