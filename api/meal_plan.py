from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user
from api.errors import BadRequestError, NotFoundError
from api.schemas import (
    MealPlanEntryIn,
    MealPlanEntryOut,
    MealPlanEntryUpdate,
    MealPlanOut,
    MealPlanSummary,
    MessageOut,
)
from core.meal_plan import order_entries, resolve_range, summarize
from services.db import MealPlanEntry, User, get_session
from services.queries import get_visible_recipe

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def _range(start: dt.date | None, end: dt.date | None) -> tuple[dt.date, dt.date]:
    try:
        return resolve_range(start, end)
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc


async def _entries(
    db: AsyncSession, user: User, start: dt.date, end: dt.date
) -> list[MealPlanEntry]:
    res = await db.execute(
        select(MealPlanEntry).where(
            MealPlanEntry.user_id == user.id,
            MealPlanEntry.date >= start,
            MealPlanEntry.date <= end,
        )
    )
    return order_entries(list(res.scalars().all()))


async def _own_entry(db: AsyncSession, entry_id: int, user: User) -> MealPlanEntry:
    entry = await db.get(MealPlanEntry, entry_id)
    if entry is None or entry.user_id != user.id:
        raise NotFoundError("Meal plan entry not found")
    return entry


# ───────────────────────── read ─────────────────────────────
@router.get("", response_model=MealPlanOut, summary="Meal plan for a date range")
async def get_meal_plan(
    start: dt.date | None = Query(None, description="defaults to this week's Monday"),
    end: dt.date | None = Query(None, description="inclusive"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MealPlanOut:
    start, end = _range(start, end)
    entries = await _entries(db, user, start, end)
    return MealPlanOut(
        start=start,
        end=end,
        entries=[MealPlanEntryOut.model_validate(e, from_attributes=True) for e in entries],
    )


@router.get("/summary", response_model=MealPlanSummary)
async def get_meal_plan_summary(
    start: dt.date | None = None,
    end: dt.date | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MealPlanSummary:
    start, end = _range(start, end)
    entries = await _entries(db, user, start, end)
    rows = [
        {
            "date": e.date,
            "meal_type": e.meal_type,
            "servings": e.servings,
            "calories": e.recipe.calories,
        }
        for e in entries
    ]
    return MealPlanSummary(**summarize(rows, start, end))


# ───────────────────────── write ────────────────────────────
@router.post("", response_model=MealPlanEntryOut, status_code=status.HTTP_201_CREATED)
async def add_entry(
    body: MealPlanEntryIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MealPlanEntryOut:
    await get_visible_recipe(db, body.recipe_id, user)
    entry = MealPlanEntry(user_id=user.id, **body.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry, attribute_names=["recipe"])
    return MealPlanEntryOut.model_validate(entry, from_attributes=True)


@router.put("/{entry_id}", response_model=MealPlanEntryOut)
async def update_entry(
    entry_id: int,
    body: MealPlanEntryUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MealPlanEntryOut:
    entry = await _own_entry(db, entry_id, user)
    changes = body.model_dump(exclude_unset=True)

    if changes.get("recipe_id") is not None:
        await get_visible_recipe(db, changes["recipe_id"], user)

    for field, value in changes.items():
        if value is None and field != "notes":
            continue
        setattr(entry, field, value)

    await db.commit()
    await db.refresh(entry, attribute_names=["recipe"])
    return MealPlanEntryOut.model_validate(entry, from_attributes=True)


@router.delete("/{entry_id}", response_model=MessageOut)
async def delete_entry(
    entry_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MessageOut:
    entry = await _own_entry(db, entry_id, user)
    await db.delete(entry)
    await db.commit()
    return MessageOut(message="Meal plan entry removed")
