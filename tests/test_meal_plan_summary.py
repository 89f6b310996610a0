"""
core/meal_plan.py without the database.
"""
from datetime import date

import pytest

from core.meal_plan import MAX_RANGE_DAYS, resolve_range, summarize, week_bounds

WED = date(2024, 5, 8)


# ── ranges ───────────────────────────────────────────────────────────
def test_week_bounds_monday_to_sunday():
    assert week_bounds(WED) == (date(2024, 5, 6), date(2024, 5, 12))


def test_resolve_defaults():
    assert resolve_range(None, None, today=WED) == (date(2024, 5, 6), date(2024, 5, 12))
    assert resolve_range(WED, None) == (WED, date(2024, 5, 14))
    assert resolve_range(None, WED) == (date(2024, 5, 2), WED)


def test_resolve_rejects_inverted_and_long_ranges():
    with pytest.raises(ValueError):
        resolve_range(date(2024, 5, 9), date(2024, 5, 8))
    with pytest.raises(ValueError):
        resolve_range(date(2024, 1, 1), date(2024, 3, 31))


def test_range_limits_inclusive():
    assert resolve_range(WED, WED) == (WED, WED)
    start = date(2024, 1, 1)
    end = date.fromordinal(start.toordinal() + MAX_RANGE_DAYS - 1)
    assert resolve_range(start, end) == (start, end)


# ── summary ──────────────────────────────────────────────────────────
ENTRIES = [
    dict(date=date(2024, 5, 6), meal_type="breakfast", servings=1, calories=350),
    dict(date=date(2024, 5, 6), meal_type="dinner", servings=2, calories=500),
    dict(date=date(2024, 5, 7), meal_type="dinner", servings=1, calories=None),
]


def test_summary_per_day_totals():
    s = summarize(ENTRIES, date(2024, 5, 6), date(2024, 5, 8))
    assert [d["date"] for d in s["days"]] == [date(2024, 5, 6), date(2024, 5, 7), date(2024, 5, 8)]
    assert [d["meals"] for d in s["days"]] == [2, 1, 0]
    assert [d["calories"] for d in s["days"]] == [1350.0, 0.0, 0.0]
    assert s["total_calories"] == 1350.0
    assert s["total_meals"] == 3


def test_summary_meal_type_counts_keep_order():
    s = summarize(ENTRIES, date(2024, 5, 6), date(2024, 5, 8))
    assert list(s["by_meal_type"]) == ["breakfast", "lunch", "dinner", "snack"]
    assert s["by_meal_type"]["dinner"] == 2
    assert s["by_meal_type"]["lunch"] == 0


def test_summary_empty_range():
    s = summarize([], date(2024, 5, 6), date(2024, 5, 7))
    assert s["total_meals"] == 0
    assert [d["meals"] for d in s["days"]] == [0, 0]
    assert all(isinstance(d["calories"], float) for d in s["days"])
