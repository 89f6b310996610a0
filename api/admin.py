from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Pagination, pagination, require_admin
from api.errors import BadRequestError, NotFoundError
from api.schemas import AdminStats, MessageOut, Page, RecipeOut, RoleUpdate, UserOut
from services.db import (
    Collection,
    Favorite,
    MealPlanEntry,
    Recipe,
    User,
    delete_recipe,
    delete_user,
    get_session,
)
from services.queries import filter_recipes, paginate, sort_recipes

_LOG = logging.getLogger(__name__)

router = APIRouter()


async def _user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


# ───────────────────────── users ────────────────────────────
@router.get("/users", response_model=Page[UserOut])
async def list_users(
    search: str | None = Query(None, description="matches name or email"),
    page: Pagination = Depends(pagination),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> Page[UserOut]:
    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    rows, total = await paginate(db, stmt, page)
    items = [UserOut.model_validate(u, from_attributes=True) for (u,) in rows]
    return Page[UserOut].build(items, page.page, page.limit, total)


@router.put("/users/{user_id}/role", response_model=UserOut)
async def set_role(
    user_id: int,
    body: RoleUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> UserOut:
    user = await _user_or_404(db, user_id)
    if user.id == admin.id and body.role != "admin":
        raise BadRequestError("You cannot remove your own admin role")
    user.role = body.role
    await db.commit()
    _LOG.info("admin %s set role of user %s to %s", admin.id, user.id, body.role)
    return UserOut.model_validate(user, from_attributes=True)


@router.delete("/users/{user_id}", response_model=MessageOut)
async def remove_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> MessageOut:
    user = await _user_or_404(db, user_id)
    if user.id == admin.id:
        raise BadRequestError("You cannot delete your own account")
    await delete_user(db, user)
    await db.commit()
    _LOG.info("admin %s deleted user %s", admin.id, user_id)
    return MessageOut(message="User removed")


# ───────────────────────── recipes ──────────────────────────
@router.get("/recipes", response_model=Page[RecipeOut])
async def list_all_recipes(
    search: str | None = None,
    page: Pagination = Depends(pagination),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> Page[RecipeOut]:
    stmt = sort_recipes(filter_recipes(select(Recipe), search=search))
    rows, total = await paginate(db, stmt, page)
    items = [RecipeOut.model_validate(r, from_attributes=True) for (r,) in rows]
    return Page[RecipeOut].build(items, page.page, page.limit, total)


@router.delete("/recipes/{recipe_id}", response_model=MessageOut)
async def remove_any_recipe(
    recipe_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> MessageOut:
    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    await delete_recipe(db, recipe)
    await db.commit()
    _LOG.info("admin %s deleted recipe %s", admin.id, recipe_id)
    return MessageOut(message="Recipe removed")


# ───────────────────────── stats ────────────────────────────
@router.get("/stats", response_model=AdminStats)
async def stats(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> AdminStats:
    async def count(*criteria, model=None) -> int:
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)
        return (await db.execute(stmt)).scalar_one()

    return AdminStats(
        users=await count(model=User),
        admins=await count(User.role == "admin", model=User),
        recipes=await count(model=Recipe),
        public_recipes=await count(Recipe.is_public.is_(True), model=Recipe),
        favorites=await count(model=Favorite),
        collections=await count(model=Collection),
        meal_plan_entries=await count(model=MealPlanEntry),
    )
