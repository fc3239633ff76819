import pytest
from datetime import datetime, timedelta, timezone

from microscopy.errors import InvalidResult
from microscopy.models.schemas import (
    AnalysisResult,
    HistoryEntry,
    RiskLevel,
    validate_result,
)

from conftest import make_payload, make_result


def test_from_payload_accepts_camel_case(result):
    assert result.total_organisms == 80
    assert result.unique_species_count == 5
    assert result.high_risk_alerts[0].risk_level == RiskLevel.HIGH.value
    assert [s.name for s in result.species_distribution][0] == "Chaetoceros"
    assert result.id.startswith("scan_")


def test_from_payload_accepts_snake_case():
    payload = make_payload()
    snake = {
        "image_ref": payload["imageRef"],
        "total_organisms": 10,
        "unique_species_count": 1,
        "environmental": {
            "location": "Dock A",
            "temperature": "27.0°C",
            "timestamp_utc": datetime(2026, 1, 1, 12, 0),
        },
        "species_distribution": [{"name": "Other", "count": 10}],
    }
    result = AnalysisResult.from_payload(snake)
    assert result.high_risk_alerts == ()
    # Naive timestamps are taken as UTC
    assert result.environmental.timestamp_utc.tzinfo == timezone.utc


def test_timestamp_normalised_to_utc():
    ts = datetime(2026, 10, 19, 14, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    result = make_result(
        environmental={"location": "x", "temperature": "28°C", "timestampUTC": ts}
    )
    assert result.environmental.timestamp_utc == datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


def test_negative_count_rejected():
    with pytest.raises(InvalidResult):
        make_result(totalOrganisms=-1)
    with pytest.raises(InvalidResult):
        make_result(speciesDistribution=[{"name": "Other", "count": -3}])
    with pytest.raises(InvalidResult):
        make_result(
            highRiskAlerts=[{"name": "D", "species": "Dino", "count": -1, "riskLevel": "High"}]
        )


def test_duplicate_species_rejected():
    with pytest.raises(InvalidResult):
        make_result(
            speciesDistribution=[
                {"name": "Other", "count": 1},
                {"name": "Other", "count": 2},
            ]
        )


def test_invalid_timestamp_rejected():
    with pytest.raises(InvalidResult):
        make_result(
            environmental={"location": "x", "temperature": "28°C", "timestampUTC": "not-a-date"}
        )


def test_missing_field_rejected():
    payload = make_payload()
    del payload["environmental"]
    with pytest.raises(InvalidResult):
        AnalysisResult.from_payload(payload)


def test_invalid_result_is_value_error():
    with pytest.raises(ValueError):
        make_result(totalOrganisms=-5)


def test_empty_distribution_allowed():
    result = make_result(speciesDistribution=[], totalOrganisms=0, uniqueSpeciesCount=0)
    assert result.species_distribution == ()


def test_result_is_frozen(result):
    with pytest.raises(Exception):
        result.total_organisms = 1


def test_payload_round_trip(result):
    again = AnalysisResult.from_payload(result.to_payload())
    assert again == result
    assert "timestampUTC" in result.to_payload()["environmental"]


def test_validate_result_passthrough_and_mapping(result):
    assert validate_result(result) is result
    assert validate_result(make_payload()).total_organisms == 80
    with pytest.raises(InvalidResult):
        validate_result("not a result")


def test_history_entry_name_and_ids(result):
    entry = HistoryEntry(name="  Dock-A-5 ", snapshot=result)
    assert entry.name == "Dock-A-5"
    assert entry.id.startswith("history_")
    assert entry.id != result.id
    assert entry.saved_at.tzinfo == timezone.utc

    with pytest.raises(ValueError):
        HistoryEntry(name="   ", snapshot=result)
    with pytest.raises(ValueError):
        HistoryEntry(id=result.id, name="clash", snapshot=result)


def test_unused_backend_fields_ignored():
    payload = make_payload(confidence=0.93)
    payload["speciesDistribution"][0]["boundingBoxes"] = 12
    payload["environmental"]["salinity"] = "35 PSU"
    result = AnalysisResult.from_payload(payload)
    assert result.total_organisms == 80
    assert "confidence" not in result.to_payload()


def test_unknown_risk_level_kept_as_text():
    result = make_result(
        highRiskAlerts=[
            {"name": "Karenia", "species": "Dinoflagellate", "count": 3, "riskLevel": "Critical"}
        ]
    )
    assert result.high_risk_alerts[0].risk_level == "Critical"

    with pytest.raises(InvalidResult):
        make_result(
            highRiskAlerts=[{"name": "D", "species": "Dino", "count": 1, "riskLevel": "  "}]
        )


def test_enum_risk_level_stored_as_value():
    from microscopy.models.schemas import HighRiskAlert

    alert = HighRiskAlert(name="D", species="Dino", count=1, risk_level=RiskLevel.MODERATE)
    assert alert.risk_level == "Moderate"
    assert HighRiskAlert(name="D", species="Dino", count=1).risk_level == "High"


def test_blank_species_name_rejected():
    # Distribution rows are keyed by name; a blank one cannot be labelled.
    with pytest.raises(InvalidResult):
        make_result(speciesDistribution=[{"name": "  ", "count": 4}])


def test_history_entry_rejects_unknown_fields(result):
    with pytest.raises(ValueError):
        HistoryEntry(name="x", snapshot=result, notes="extra")
