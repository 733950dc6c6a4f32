"""
Tests for the per-user statistics engine.
"""

from collections import Counter

import pytest

from backend.roll_stats import (
    round_half_up,
    calc_mean,
    calc_median,
    calc_mode,
    compute_stats,
    export_text,
    build_roll_record,
    is_double,
)


def rolls_of(values, success=True):
    return [
        {"id": str(i), "value": v, "success": success, "type": "",
         "fortune_used_reroll": False, "dark_deal_reroll": False}
        for i, v in enumerate(values)
    ]


# ============================================================================
# ROUNDING / BASIC MEASURES
# ============================================================================

@pytest.mark.parametrize("value, expected", [(2.5, 3), (3.5, 4), (2.4999, 2), (0.5, 1), (7, 7)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_mean_rounds_half_up():
    assert calc_mean([1, 2]) == 2
    assert calc_mean([10, 20, 31]) == 20


def test_median_odd_and_even():
    assert calc_median([30, 10, 20]) == 20
    assert calc_median([1, 2, 3, 4]) == 2.5
    assert calc_median([4, 1, 3, 3]) == 3


def test_mode_ties_keep_first_seen_order():
    counts, mode, mode_count = calc_mode([50, 7, 7, 50, 3])
    assert mode == [50, 7]
    assert mode_count == 2
    assert counts == {50: 2, 7: 2, 3: 1}


@pytest.mark.parametrize("values", [
    [1, 2, 2, 3],
    [99, 1, 50, 50, 1, 99, 12],
    [42],
    [5, 5, 5, 6, 6, 6, 7],
])
def test_mode_matches_direct_count(values):
    _, mode, mode_count = calc_mode(values)
    freq = Counter(values)
    assert mode_count == max(freq.values())
    assert set(mode) == {v for v, c in freq.items() if c == mode_count}


# ============================================================================
# SNAPSHOT
# ============================================================================

def test_empty_history_is_all_zero():
    stats = compute_stats([], 5, 96)
    assert stats["mode"] == []
    assert stats["last_roll"] == ""
    for key, value in stats.items():
        if key not in ("mode", "last_roll"):
            assert value == 0, key


def test_basic_scenario():
    stats = compute_stats(rolls_of([1, 2, 2, 3]), 5, 96)
    assert stats["mean"] == 2
    assert stats["median"] == 2
    assert stats["mode"] == [2]
    assert stats["mode_count"] == 2
    assert stats["mode_count_percentage"] == 50
    assert stats["count"] == 4
    assert stats["last_roll"] == "1, 2, 2, 3"


def test_auto_success_and_failure_thresholds():
    stats = compute_stats(rolls_of([1, 5, 6, 50, 95, 96, 100]), 5, 96)
    assert stats["auto_success"] == 2
    assert stats["auto_success_percentage"] == 29
    assert stats["auto_failure"] == 2
    assert stats["auto_failure_percentage"] == 29


def test_criticals_and_fumbles():
    rolls = rolls_of([11, 44, 100], success=True) + rolls_of([22, 99, 45], success=False)
    stats = compute_stats(rolls, 5, 96)
    assert stats["criticals"] == 3
    assert stats["fumbles"] == 2
    assert stats["criticals_percentage"] == 50
    assert stats["fumbles_percentage"] == 33


def test_is_double():
    assert is_double(33)
    assert is_double(100)
    assert not is_double(10)
    assert not is_double(1)


def test_reroll_counts():
    rolls = rolls_of([10, 20, 30])
    rolls[0]["fortune_used_reroll"] = True
    rolls[2]["dark_deal_reroll"] = True
    stats = compute_stats(rolls, 5, 96)
    assert stats["fortune"] == 1
    assert stats["dark_deal"] == 1


def test_export_text_lists_frequencies_by_ascending_value():
    assert export_text(rolls_of([40, 7, 40])) == "7,1\n40,2\n"
    assert export_text([]) == ""


# ============================================================================
# RECORD CONSTRUCTION
# ============================================================================

def event(roll_id, value, fortune=False, reroll=False):
    return {
        "id": roll_id,
        "value": value,
        "success": True,
        "skill_name": "Cool",
        "reroll_context": {"fortune": fortune, "reroll": reroll},
    }


def test_plain_roll_has_no_reroll_flags():
    record = build_roll_record(event("a", 30))
    assert record == {
        "id": "a", "value": 30, "success": True, "type": "Cool",
        "fortune_used_reroll": False, "dark_deal_reroll": False,
    }


def test_fortune_then_dark_deal_counts_each_once():
    first = build_roll_record(event("a", 80, fortune=True, reroll=True))
    second = build_roll_record(event("b", 12, fortune=True, reroll=True), previous=first)

    assert first["fortune_used_reroll"] and not first["dark_deal_reroll"]
    assert second["dark_deal_reroll"] and not second["fortune_used_reroll"]

    stats = compute_stats([first, second], 5, 96)
    assert stats["fortune"] == 1
    assert stats["dark_deal"] == 1


def test_generic_reroll_is_dark_deal():
    record = build_roll_record(event("a", 80, reroll=True))
    assert record["dark_deal_reroll"]
    assert not record["fortune_used_reroll"]


def test_missing_reroll_context_defaults_to_plain():
    record = build_roll_record({"id": 7, "value": "55", "success": False})
    assert record["id"] == "7"
    assert record["value"] == 55
    assert record["type"] == ""
    assert not record["fortune_used_reroll"]
    assert not record["dark_deal_reroll"]
