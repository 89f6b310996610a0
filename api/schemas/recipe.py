from __future__ import annotations
from datetime import datetime
from typing import Generic, List, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

Difficulty = Literal["easy", "medium", "hard"]
SortOrder = Literal["newest", "oldest", "title"]

T = TypeVar("T")


def _as_lines(value: object) -> object:
    """Accept a newline separated textarea as well as a JSON list."""
    if isinstance(value, str):
        value = value.splitlines()
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    return value


def _as_tags(value: object) -> object:
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, list):
        seen: list[str] = []
        for tag in (str(v).strip().lower() for v in value):
            if tag and tag not in seen:
                seen.append(tag)
        return seen
    return value


class _RecipeFields(BaseModel):
    description: str | None = Field(None, max_length=5000)
    ingredients: List[str] = []
    steps: List[str] = []
    category: str | None = Field(None, max_length=60, examples=["dessert"])
    cuisine: str | None = Field(None, max_length=60, examples=["italian"])
    difficulty: Difficulty = "easy"
    prep_time: int | None = Field(None, ge=0, description="minutes")
    cook_time: int | None = Field(None, ge=0, description="minutes")
    servings: int | None = Field(None, ge=1)
    calories: int | None = Field(None, ge=0, description="kcal per serving")
    image_url: str | None = Field(None, max_length=500)
    tags: List[str] = []
    is_public: bool = False

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def split_lines(cls, v: object) -> object:
        return _as_lines(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: object) -> object:
        return _as_tags(v)


class RecipeCreate(_RecipeFields):
    title: str = Field(..., min_length=1, max_length=200)


class RecipeUpdate(_RecipeFields):
    """Every field optional; only the ones sent are applied."""
    title: str | None = Field(None, min_length=1, max_length=200)
    ingredients: List[str] | None = None
    steps: List[str] | None = None
    difficulty: Difficulty | None = None
    tags: List[str] | None = None
    is_public: bool | None = None


class RecipeOut(_RecipeFields):
    id: int
    owner_id: int
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicRecipeOut(RecipeOut):
    author_name: str
    favorite_count: int = 0


class RecipeSummary(BaseModel):
    id: int
    title: str
    image_url: str | None = None
    calories: int | None = None

    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel, Generic[T]):
    items: List[T]
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, items: List[T], page: int, limit: int, total: int) -> "Page[T]":
        return cls(
            items=items,
            page=page,
            limit=limit,
            total=total,
            pages=(total + limit - 1) // limit if total else 0,
        )
