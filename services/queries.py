"""
services/queries.py
────────────────────────────────────────────────────────────────────────
Query building blocks shared by the private, public and admin recipe
listings: text / category / tag filters, sorting and page slicing.
"""
from __future__ import annotations

import json
from typing import Any, Sequence

from sqlalchemy import Select, String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Pagination
from api.errors import ForbiddenError, NotFoundError
from services.db import Recipe, User


def _like_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def filter_recipes(
    stmt: Select,
    *,
    search: str | None = None,
    category: str | None = None,
    cuisine: str | None = None,
    tag: str | None = None,
) -> Select:
    if search and search.strip():
        pattern = f"%{_like_escape(search.strip())}%"
        stmt = stmt.where(
            or_(
                Recipe.title.ilike(pattern, escape="\\"),
                Recipe.description.ilike(pattern, escape="\\"),
            )
        )
    if category:
        stmt = stmt.where(func.lower(Recipe.category) == category.strip().lower())
    if cuisine:
        stmt = stmt.where(func.lower(Recipe.cuisine) == cuisine.strip().lower())
    if tag:
        # tags are stored lower-cased as a JSON list of strings
        needle = _like_escape(json.dumps(tag.strip().lower(), ensure_ascii=False))
        stmt = stmt.where(cast(Recipe.tags, String).like(f"%{needle}%", escape="\\"))
    return stmt


def sort_recipes(stmt: Select, sort: str = "newest") -> Select:
    if sort == "oldest":
        return stmt.order_by(Recipe.created_at.asc(), Recipe.id.asc())
    if sort == "title":
        return stmt.order_by(func.lower(Recipe.title).asc(), Recipe.id.asc())
    return stmt.order_by(Recipe.created_at.desc(), Recipe.id.desc())


async def paginate(
    db: AsyncSession, stmt: Select, page: Pagination
) -> tuple[Sequence[Any], int]:
    """Run `stmt` for one page and return `(rows, total)`."""
    total = (
        await db.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))
    ).scalar_one()
    rows = (await db.execute(stmt.offset(page.offset).limit(page.limit))).all()
    return rows, total


async def get_visible_recipe(db: AsyncSession, recipe_id: int, user: User) -> Recipe:
    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    if not recipe.visible_to(user):
        raise ForbiddenError("Not authorized to view this recipe")
    return recipe


async def get_owned_recipe(db: AsyncSession, recipe_id: int, user: User) -> Recipe:
    """Recipe the caller may modify: their own, or any one for admins."""
    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    if recipe.owner_id != user.id and not user.is_admin:
        raise ForbiddenError("Not authorized to modify this recipe")
    return recipe
