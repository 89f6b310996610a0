from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user
from api.errors import ConflictError, NotFoundError
from api.schemas import MessageOut, RecipeOut
from services.db import Favorite, Recipe, User, get_session
from services.queries import get_visible_recipe

router = APIRouter()


async def _favorite(db: AsyncSession, user_id: int, recipe_id: int) -> Favorite | None:
    res = await db.execute(
        select(Favorite).where(
            Favorite.user_id == user_id, Favorite.recipe_id == recipe_id
        )
    )
    return res.scalar_one_or_none()


@router.get("", response_model=list[RecipeOut], summary="Recipes the caller favorited")
async def list_favorites(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[RecipeOut]:
    res = await db.execute(
        select(Recipe)
        .join(Favorite, Favorite.recipe_id == Recipe.id)
        .where(Favorite.user_id == user.id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    # a recipe made private after being favorited drops out of the list
    return [
        RecipeOut.model_validate(r, from_attributes=True)
        for r in res.scalars().all()
        if r.visible_to(user)
    ]


@router.post(
    "/{recipe_id}",
    response_model=RecipeOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    recipe_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> RecipeOut:
    recipe = await get_visible_recipe(db, recipe_id, user)
    if await _favorite(db, user.id, recipe_id):
        raise ConflictError("Recipe already in favorites")

    db.add(Favorite(user_id=user.id, recipe_id=recipe_id))
    await db.commit()
    return RecipeOut.model_validate(recipe, from_attributes=True)


@router.delete("/{recipe_id}", response_model=MessageOut)
async def remove_favorite(
    recipe_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MessageOut:
    fav = await _favorite(db, user.id, recipe_id)
    if fav is None:
        raise NotFoundError("Recipe is not in favorites")
    await db.delete(fav)
    await db.commit()
    return MessageOut(message="Removed from favorites")
