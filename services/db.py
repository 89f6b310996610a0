"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for users, recipes and everything hanging off them
* Small DAO helpers used by routers / scripts
"""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
import datetime as dt
from datetime import datetime, timezone
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    delete,
    select,
)
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

from config import settings

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None
_SESSIONMAKER: async_sessionmaker[AsyncSession] | None = None


async def _create_engine() -> AsyncEngine:
    if not settings.database_url:
        raise RuntimeError("Set the DATABASE_URL env var")
    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        # tag filter matches against the raw JSON text
        json_serializer=lambda obj: json.dumps(obj, ensure_ascii=False),
    )


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


async def sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _SESSIONMAKER
    if _SESSIONMAKER is None:
        _SESSIONMAKER = async_sessionmaker(await engine(), expire_on_commit=False)
    return _SESSIONMAKER


async def init_models() -> None:
    """Connect and create any missing tables."""
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    _LOG.info("Database connected: %s", eng.url.render_as_string(hide_password=True))


async def dispose_engine() -> None:
    global _ENGINE, _SESSIONMAKER
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE = None
    _SESSIONMAKER = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class _Timestamps:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )


collection_recipes = Table(
    "collection_recipes",
    Base.metadata,
    Column("collection_id", ForeignKey("collections.id"), primary_key=True),
    Column("recipe_id", ForeignKey("recipes.id"), primary_key=True),
)


class User(_Timestamps, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(16), default="user")
    bio: Mapped[str | None] = mapped_column(Text)
    avatar_url: Mapped[str | None] = mapped_column(String(500))

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Recipe(_Timestamps, Base):
    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)
    ingredients: Mapped[list] = mapped_column(JSON, default=list)
    steps: Mapped[list] = mapped_column(JSON, default=list)
    category: Mapped[str | None] = mapped_column(String(60), index=True)
    cuisine: Mapped[str | None] = mapped_column(String(60))
    difficulty: Mapped[str] = mapped_column(String(16), default="easy")
    prep_time: Mapped[int | None] = mapped_column(Integer)   # minutes
    cook_time: Mapped[int | None] = mapped_column(Integer)   # minutes
    servings: Mapped[int | None] = mapped_column(Integer)
    calories: Mapped[int | None] = mapped_column(Integer)    # per serving
    image_url: Mapped[str | None] = mapped_column(String(500))
    tags: Mapped[list] = mapped_column(JSON, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    def visible_to(self, user: User) -> bool:
        return self.is_public or self.owner_id == user.id or user.is_admin


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    recipe_id: Mapped[int] = mapped_column(ForeignKey("recipes.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)


class Collection(_Timestamps, Base):
    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String(120))
    description: Mapped[str | None] = mapped_column(Text)

    recipes: Mapped[list[Recipe]] = relationship(
        secondary=collection_recipes, lazy="selectin", order_by=Recipe.title
    )


class MealPlanEntry(_Timestamps, Base):
    __tablename__ = "meal_plan_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    recipe_id: Mapped[int] = mapped_column(ForeignKey("recipes.id"))
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    meal_type: Mapped[str] = mapped_column(String(16))
    servings: Mapped[int] = mapped_column(Integer, default=1)
    notes: Mapped[str | None] = mapped_column(Text)

    recipe: Mapped[Recipe] = relationship(lazy="selectin")


# ───────── DAO helpers ───────────────────────────────────────────────

async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email.strip().lower()))
    return res.scalar_one_or_none()


async def delete_recipe(db: AsyncSession, recipe: Recipe) -> None:
    """Remove a recipe and every favorite / collection link / plan entry on it."""
    await db.execute(delete(Favorite).where(Favorite.recipe_id == recipe.id))
    await db.execute(
        delete(collection_recipes).where(collection_recipes.c.recipe_id == recipe.id)
    )
    await db.execute(delete(MealPlanEntry).where(MealPlanEntry.recipe_id == recipe.id))
    await db.delete(recipe)


async def delete_user(db: AsyncSession, user: User) -> None:
    """Remove a user together with all the rows they own."""
    recipes = (
        await db.execute(select(Recipe).where(Recipe.owner_id == user.id))
    ).scalars().all()
    for recipe in recipes:
        await delete_recipe(db, recipe)

    own_collections = select(Collection.id).where(Collection.owner_id == user.id)
    await db.execute(
        delete(collection_recipes).where(
            collection_recipes.c.collection_id.in_(own_collections)
        )
    )
    await db.execute(delete(Collection).where(Collection.owner_id == user.id))
    await db.execute(delete(Favorite).where(Favorite.user_id == user.id))
    await db.execute(delete(MealPlanEntry).where(MealPlanEntry.user_id == user.id))
    await db.delete(user)


# ───────── session helpers ───────────────────────────────────────────

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async_session = await sessionmaker()
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """`async with session_scope() as db:` for scripts outside FastAPI."""
    await init_models()
    try:
        async_session = await sessionmaker()
        async with async_session() as session:
            yield session
    finally:
        await dispose_engine()
