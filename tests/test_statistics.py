from microscopy.processing.statistics import (
    compute_statistics,
    round_half_up_percentage,
)

from conftest import make_result


def test_dock_scenario(result):
    stats = compute_statistics(result)
    assert stats.total == 80
    assert stats.share_for("Dinophysis").percentage == 6
    assert [s.name for s in stats.shares] == [
        "Chaetoceros",
        "Thalassiosira",
        "Prorocentrum",
        "Dinophysis",
        "Other",
    ]


def test_total_is_sum_of_counts_not_total_organisms():
    result = make_result(
        totalOrganisms=999,
        speciesDistribution=[{"name": "A", "count": 3}, {"name": "B", "count": 4}],
    )
    assert compute_statistics(result).total == 7


def test_empty_scan_has_zero_percentages():
    result = make_result(
        speciesDistribution=[{"name": "A", "count": 0}, {"name": "B", "count": 0}]
    )
    stats = compute_statistics(result)
    assert stats.total == 0
    assert all(s.percentage == 0 for s in stats.shares)

    empty = make_result(speciesDistribution=[])
    assert compute_statistics(empty).shares == ()


def test_percentages_within_bounds():
    result = make_result(
        speciesDistribution=[
            {"name": "A", "count": 1},
            {"name": "B", "count": 0},
            {"name": "C", "count": 997},
        ]
    )
    for share in compute_statistics(result).shares:
        assert 0 <= share.percentage <= 100


def test_halves_round_up():
    # 1/8 = 12.5% -> 13, 3/8 = 37.5% -> 38
    assert round_half_up_percentage(1, 8) == 13
    assert round_half_up_percentage(3, 8) == 38
    assert round_half_up_percentage(0, 0) == 0


def test_rounding_drift_is_preserved():
    # Three equal thirds: 33 + 33 + 33 = 99
    result = make_result(
        speciesDistribution=[
            {"name": "A", "count": 1},
            {"name": "B", "count": 1},
            {"name": "C", "count": 1},
        ]
    )
    stats = compute_statistics(result)
    assert [s.percentage for s in stats.shares] == [33, 33, 33]
    assert stats.percentage_sum == 99


def test_same_input_same_output(result):
    replay = result.model_copy(deep=True)
    assert compute_statistics(result) == compute_statistics(replay)
