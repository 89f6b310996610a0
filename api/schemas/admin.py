from __future__ import annotations

from pydantic import BaseModel


class AdminStats(BaseModel):
    users: int
    admins: int
    recipes: int
    public_recipes: int
    favorites: int
    collections: int
    meal_plan_entries: int


class MessageOut(BaseModel):
    message: str
