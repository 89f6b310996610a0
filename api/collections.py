from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user
from api.errors import ConflictError, NotFoundError
from api.schemas import CollectionIn, CollectionOut, CollectionUpdate, MessageOut
from services.db import Collection, User, get_session
from services.queries import get_visible_recipe

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
async def _own_collection(db: AsyncSession, collection_id: int, user: User) -> Collection:
    """Another user's collection is reported as missing, not forbidden."""
    col = await db.get(Collection, collection_id)
    if col is None or col.owner_id != user.id:
        raise NotFoundError("Collection not found")
    return col


async def _serialize(db: AsyncSession, col: Collection) -> CollectionOut:
    await db.refresh(col, attribute_names=["recipes", "updated_at"])
    return CollectionOut.model_validate(col, from_attributes=True)


# ───────────────────────── list / create ────────────────────
@router.get("", response_model=list[CollectionOut])
async def list_collections(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[CollectionOut]:
    res = await db.execute(
        select(Collection)
        .where(Collection.owner_id == user.id)
        .order_by(Collection.name, Collection.id)
    )
    return [
        CollectionOut.model_validate(c, from_attributes=True)
        for c in res.scalars().all()
    ]


@router.post("", response_model=CollectionOut, status_code=status.HTTP_201_CREATED)
async def create_collection(
    body: CollectionIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CollectionOut:
    col = Collection(owner_id=user.id, name=body.name.strip(), description=body.description)
    db.add(col)
    await db.commit()
    return await _serialize(db, col)


# ───────────────────────── single collection ────────────────
@router.get("/{collection_id}", response_model=CollectionOut)
async def fetch_collection(
    collection_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CollectionOut:
    col = await _own_collection(db, collection_id, user)
    return CollectionOut.model_validate(col, from_attributes=True)


@router.put("/{collection_id}", response_model=CollectionOut)
async def update_collection(
    collection_id: int,
    body: CollectionUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CollectionOut:
    col = await _own_collection(db, collection_id, user)
    if body.name is not None:
        col.name = body.name.strip()
    if "description" in body.model_fields_set:
        col.description = body.description
    await db.commit()
    return await _serialize(db, col)


@router.delete("/{collection_id}", response_model=MessageOut)
async def delete_collection(
    collection_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MessageOut:
    col = await _own_collection(db, collection_id, user)
    await db.delete(col)
    await db.commit()
    return MessageOut(message="Collection removed")


# ───────────────────────── membership ───────────────────────
@router.post(
    "/{collection_id}/recipes/{recipe_id}",
    response_model=CollectionOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_recipe(
    collection_id: int,
    recipe_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CollectionOut:
    col = await _own_collection(db, collection_id, user)
    recipe = await get_visible_recipe(db, recipe_id, user)
    if any(r.id == recipe.id for r in col.recipes):
        raise ConflictError("Recipe already in collection")

    col.recipes.append(recipe)
    await db.commit()
    return await _serialize(db, col)


@router.delete("/{collection_id}/recipes/{recipe_id}", response_model=CollectionOut)
async def remove_recipe(
    collection_id: int,
    recipe_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> CollectionOut:
    col = await _own_collection(db, collection_id, user)
    match = next((r for r in col.recipes if r.id == recipe_id), None)
    if match is None:
        raise NotFoundError("Recipe is not in this collection")

    col.recipes.remove(match)
    await db.commit()
    return await _serialize(db, col)
