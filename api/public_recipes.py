"""Unauthenticated feed of public recipes for the landing and explore pages."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Pagination, pagination
from api.errors import NotFoundError
from api.schemas import Page, PublicRecipeOut, RecipeOut, SortOrder
from services.db import Favorite, Recipe, User, get_session
from services.queries import filter_recipes, paginate, sort_recipes

router = APIRouter()


def _feed_query() -> Select:
    fav_counts = (
        select(Favorite.recipe_id, func.count(Favorite.id).label("n"))
        .group_by(Favorite.recipe_id)
        .subquery()
    )
    return (
        select(Recipe, User.name, func.coalesce(fav_counts.c.n, 0))
        .join(User, User.id == Recipe.owner_id)
        .outerjoin(fav_counts, fav_counts.c.recipe_id == Recipe.id)
        .where(Recipe.is_public.is_(True))
    )


def _to_out(recipe: Recipe, author: str, favorites: int) -> PublicRecipeOut:
    base = RecipeOut.model_validate(recipe, from_attributes=True)
    return PublicRecipeOut(**base.model_dump(), author_name=author, favorite_count=favorites)


@router.get("", response_model=Page[PublicRecipeOut])
async def list_public_recipes(
    search: str | None = None,
    category: str | None = None,
    cuisine: str | None = None,
    tag: str | None = None,
    sort: SortOrder = "newest",
    page: Pagination = Depends(pagination),
    db: AsyncSession = Depends(get_session),
) -> Page[PublicRecipeOut]:
    stmt = filter_recipes(
        _feed_query(), search=search, category=category, cuisine=cuisine, tag=tag
    )
    rows, total = await paginate(db, sort_recipes(stmt, sort), page)
    items = [_to_out(r, author, favs) for r, author, favs in rows]
    return Page[PublicRecipeOut].build(items, page.page, page.limit, total)


@router.get("/{recipe_id}", response_model=PublicRecipeOut)
async def fetch_public_recipe(
    recipe_id: int,
    db: AsyncSession = Depends(get_session),
) -> PublicRecipeOut:
    row = (await db.execute(_feed_query().where(Recipe.id == recipe_id))).first()
    if row is None:
        raise NotFoundError("Recipe not found")
    recipe, author, favs = row
    return _to_out(recipe, author, favs)
