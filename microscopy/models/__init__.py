"""Data schemas and validation."""
from .schemas import (
    AnalysisResult,
    EnvironmentalData,
    HighRiskAlert,
    HistoryEntry,
    RiskLevel,
    SpeciesCount,
    validate_result,
)

__all__ = [
    "AnalysisResult",
    "EnvironmentalData",
    "HighRiskAlert",
    "HistoryEntry",
    "RiskLevel",
    "SpeciesCount",
    "validate_result",
]
