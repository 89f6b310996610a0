from __future__ import annotations
import datetime as dt
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .recipe import RecipeSummary

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class MealPlanEntryIn(BaseModel):
    recipe_id: int
    date: dt.date
    meal_type: MealType
    servings: int = Field(1, ge=1, le=50)
    notes: str | None = Field(None, max_length=1000)


class MealPlanEntryUpdate(BaseModel):
    recipe_id: int | None = None
    date: dt.date | None = None
    meal_type: MealType | None = None
    servings: int | None = Field(None, ge=1, le=50)
    notes: str | None = Field(None, max_length=1000)


class MealPlanEntryOut(BaseModel):
    id: int
    recipe_id: int
    date: dt.date
    meal_type: MealType
    servings: int
    notes: str | None = None
    recipe: RecipeSummary

    model_config = ConfigDict(from_attributes=True)


class MealPlanOut(BaseModel):
    start: dt.date
    end: dt.date
    entries: List[MealPlanEntryOut]


class DaySummary(BaseModel):
    date: dt.date
    meals: int
    calories: float


class MealPlanSummary(BaseModel):
    start: dt.date
    end: dt.date
    days: List[DaySummary]
    by_meal_type: Dict[str, int]
    total_meals: int
    total_calories: float
