"""Pydantic schemas for scan output and saved history.

These schemas are the contract a scan source must satisfy. Any payload that
reaches the session controller goes through AnalysisResult validation, so a
malformed scan fails fast with InvalidResult instead of reaching the view.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from microscopy.errors import InvalidResult


def new_scan_id() -> str:
    return f"scan_{uuid.uuid4().hex}"


def new_history_id() -> str:
    return f"history_{uuid.uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RiskLevel(str, Enum):
    """Risk levels the dashboard knows how to label.

    Alerts carry the level as plain text, so a backend may report others.
    """

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class _ScanPayload(_Frozen):
    # Scan backends may attach fields the dashboard does not use (confidence, ...).
    model_config = ConfigDict(extra="ignore")


class HighRiskAlert(_ScanPayload):
    name: str
    species: str
    count: int = Field(ge=0)
    risk_level: str = Field(default=RiskLevel.HIGH.value, alias="riskLevel")

    @field_validator("risk_level", mode="before")
    @classmethod
    def risk_level_text(cls, v: Any) -> Any:
        if isinstance(v, RiskLevel):
            return v.value
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("Risk level cannot be empty")
            return v.strip()
        return v


class SpeciesCount(_ScanPayload):
    name: str
    count: int = Field(ge=0)

    @field_validator("name")
    @classmethod
    def name_nonempty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Species name cannot be empty")
        return v.strip()


class EnvironmentalData(_ScanPayload):
    location: str
    temperature: str
    timestamp_utc: datetime = Field(alias="timestampUTC")

    @field_validator("timestamp_utc")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are taken to be UTC already.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class AnalysisResult(_ScanPayload):
    """One scan's output. Immutable once produced."""

    id: str = Field(default_factory=new_scan_id)
    image_ref: str = Field(alias="imageRef")
    total_organisms: int = Field(ge=0, alias="totalOrganisms")
    unique_species_count: int = Field(ge=0, alias="uniqueSpeciesCount")
    high_risk_alerts: Tuple[HighRiskAlert, ...] = Field(default=(), alias="highRiskAlerts")
    environmental: EnvironmentalData
    species_distribution: Tuple[SpeciesCount, ...] = Field(alias="speciesDistribution")

    @field_validator("species_distribution")
    @classmethod
    def unique_species_names(cls, v: Tuple[SpeciesCount, ...]) -> Tuple[SpeciesCount, ...]:
        seen = set()
        for entry in v:
            if entry.name in seen:
                raise ValueError(f"Duplicate species name in distribution: {entry.name}")
            seen.add(entry.name)
        return v

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AnalysisResult":
        """Validate a raw mapping (camelCase or snake_case keys).

        Raises InvalidResult instead of pydantic's ValidationError so callers
        only deal with the domain error taxonomy.
        """
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            raise InvalidResult(str(exc)) from exc

    def to_payload(self) -> dict:
        """JSON-compatible dict using the dashboard's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class HistoryEntry(_Frozen):
    """A named, saved copy of a past analysis result."""

    id: str = Field(default_factory=new_history_id)
    name: str
    snapshot: AnalysisResult
    saved_at: datetime = Field(default_factory=utcnow, alias="savedAt")

    @field_validator("name")
    @classmethod
    def name_nonempty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("History entry name cannot be empty")
        return v.strip()

    @field_validator("saved_at")
    @classmethod
    def saved_at_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def id_distinct_from_snapshot(self) -> "HistoryEntry":
        if self.id == self.snapshot.id:
            raise ValueError("History entry id must differ from the snapshot id")
        return self

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def validate_result(candidate: Any) -> AnalysisResult:
    """Coerce scan-source output into a validated AnalysisResult."""
    if isinstance(candidate, AnalysisResult):
        return candidate
    if isinstance(candidate, Mapping):
        return AnalysisResult.from_payload(candidate)
    raise InvalidResult(
        f"Scan source returned {type(candidate).__name__}, expected AnalysisResult"
    )
