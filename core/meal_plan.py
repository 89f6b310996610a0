"""
core/meal_plan.py
────────────────────────────────────────────────────────────────────────
Date-range handling and nutrition roll-ups for a user's meal plan.

Responsibilities
----------------
1.   `week_bounds()` / `resolve_range()` – turn optional query params into
     a validated inclusive `[start, end]` range (default: this Mon–Sun).
2.   `summarize()` – per-day meal counts and calories, per-meal-type
     counts and range totals, via a pandas group-by.

Nothing here touches the database; routers hand in plain dicts.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Tuple

import pandas as pd

_LOG = logging.getLogger(__name__)

# display order inside a day
MEAL_TYPES: Tuple[str, ...] = ("breakfast", "lunch", "dinner", "snack")
MAX_RANGE_DAYS = 62


def meal_type_rank(meal_type: str) -> int:
    try:
        return MEAL_TYPES.index(meal_type)
    except ValueError:
        return len(MEAL_TYPES)


def week_bounds(today: date) -> Tuple[date, date]:
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def resolve_range(
    start: date | None,
    end: date | None,
    today: date | None = None,
) -> Tuple[date, date]:
    """
    Fill in missing bounds and validate the range.

    * neither given   → the week containing `today`
    * only `start`    → 7 days from `start`
    * only `end`      → 7 days ending on `end`

    Raises ValueError when `end` precedes `start` or the range is longer
    than MAX_RANGE_DAYS.
    """
    if start is None:
        if end is None:
            start, end = week_bounds(today or date.today())
        else:
            start = end - timedelta(days=6)
    elif end is None:
        end = start + timedelta(days=6)

    if end < start:
        raise ValueError("end date must not be before start date")
    if (end - start).days + 1 > MAX_RANGE_DAYS:
        raise ValueError(f"date range cannot exceed {MAX_RANGE_DAYS} days")
    return start, end


# ──────────────────────────── summary ─────────────────────────── #
def summarize(
    entries: Iterable[Dict[str, Any]], start: date, end: date
) -> Dict[str, Any]:
    """
    `entries` rows need `date`, `meal_type`, `servings` and `calories`
    (kcal per serving, may be None). Calories of a row are
    calories × servings; unknown calories count as 0.
    """
    days_index = pd.date_range(start, end, freq="D")
    df = pd.DataFrame(list(entries), columns=["date", "meal_type", "servings", "calories"])

    if df.empty:
        _LOG.debug("no meal plan entries between %s and %s", start, end)
        return {
            "start": start,
            "end": end,
            "days": [{"date": d.date(), "meals": 0, "calories": 0.0} for d in days_index],
            "by_meal_type": {m: 0 for m in MEAL_TYPES},
            "total_meals": 0,
            "total_calories": 0.0,
        }

    df["date"] = pd.to_datetime(df["date"])
    df["servings"] = pd.to_numeric(df["servings"], errors="coerce").fillna(1)
    df["kcal"] = pd.to_numeric(df["calories"], errors="coerce").fillna(0.0) * df["servings"]

    per_day = (
        df.groupby("date")
        .agg(meals=("meal_type", "size"), calories=("kcal", "sum"))
        .reindex(days_index, fill_value=0)
    )
    by_type = df["meal_type"].value_counts().reindex(list(MEAL_TYPES), fill_value=0)

    return {
        "start": start,
        "end": end,
        "days": [
            {
                "date": ts.date(),
                "meals": int(row.meals),
                "calories": round(float(row.calories), 1),
            }
            for ts, row in per_day.iterrows()
        ],
        "by_meal_type": {k: int(v) for k, v in by_type.items()},
        "total_meals": int(len(df)),
        "total_calories": round(float(df["kcal"].sum()), 1),
    }


def order_entries(entries: List[Any]) -> List[Any]:
    """Sort ORM entries by date, then breakfast → snack, then id."""
    return sorted(entries, key=lambda e: (e.date, meal_type_rank(e.meal_type), e.id))
