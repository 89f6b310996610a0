from __future__ import annotations
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .recipe import RecipeSummary


class CollectionIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, examples=["Weeknight dinners"])
    description: str | None = Field(None, max_length=2000)


class CollectionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, max_length=2000)


class CollectionOut(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str | None = None
    recipes: List[RecipeSummary] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
