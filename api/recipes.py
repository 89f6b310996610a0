from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Pagination, get_current_user, pagination
from api.schemas import MessageOut, Page, RecipeCreate, RecipeOut, RecipeUpdate
from services.db import Recipe, User, delete_recipe, get_session
from services.queries import (
    filter_recipes,
    get_owned_recipe,
    get_visible_recipe,
    paginate,
    sort_recipes,
)

_LOG = logging.getLogger(__name__)

router = APIRouter()

# columns that may not be cleared with an explicit null
_REQUIRED = {"title", "ingredients", "steps", "difficulty", "tags", "is_public"}


# ───────────────────────── list mine ────────────────────────
@router.get("", response_model=Page[RecipeOut], summary="List the caller's recipes")
async def list_my_recipes(
    search: str | None = Query(None, description="matches title or description"),
    category: str | None = None,
    cuisine: str | None = None,
    tag: str | None = None,
    page: Pagination = Depends(pagination),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Page[RecipeOut]:
    stmt = filter_recipes(
        select(Recipe).where(Recipe.owner_id == user.id),
        search=search,
        category=category,
        cuisine=cuisine,
        tag=tag,
    )
    rows, total = await paginate(db, sort_recipes(stmt), page)
    items = [RecipeOut.model_validate(r, from_attributes=True) for (r,) in rows]
    return Page[RecipeOut].build(items, page.page, page.limit, total)


# ───────────────────────── create ───────────────────────────
@router.post("", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    body: RecipeCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RecipeOut:
    recipe = Recipe(owner_id=user.id, **body.model_dump())
    db.add(recipe)
    await db.commit()
    _LOG.info("user %s created recipe %s", user.id, recipe.id)
    return RecipeOut.model_validate(recipe, from_attributes=True)


# ───────────────────────── fetch one ────────────────────────
@router.get("/{recipe_id}", response_model=RecipeOut)
async def fetch_recipe(
    recipe_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RecipeOut:
    recipe = await get_visible_recipe(db, recipe_id, user)
    return RecipeOut.model_validate(recipe, from_attributes=True)


# ───────────────────────── update ───────────────────────────
@router.put("/{recipe_id}", response_model=RecipeOut)
async def update_recipe(
    recipe_id: int,
    body: RecipeUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RecipeOut:
    recipe = await get_owned_recipe(db, recipe_id, user)

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED:
            continue
        setattr(recipe, field, value)

    await db.commit()
    await db.refresh(recipe)
    return RecipeOut.model_validate(recipe, from_attributes=True)


# ───────────────────────── delete ───────────────────────────
@router.delete("/{recipe_id}", response_model=MessageOut)
async def remove_recipe(
    recipe_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MessageOut:
    recipe = await get_owned_recipe(db, recipe_id, user)
    await delete_recipe(db, recipe)
    await db.commit()
    _LOG.info("user %s deleted recipe %s", user.id, recipe_id)
    return MessageOut(message="Recipe removed")
