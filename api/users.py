from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.auth import auth_payload
from api.deps import get_current_user
from api.errors import BadRequestError, ConflictError
from api.schemas import AuthOut, ProfileUpdate, UserOut
from services.auth import hash_password, verify_password
from services.db import User, get_session, get_user_by_email

router = APIRouter()


# ───────────────────────── read ─────────────────────────────
@router.get("/profile", response_model=UserOut)
async def get_profile(user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(user, from_attributes=True)


# ───────────────────────── update ───────────────────────────
@router.put("/profile", response_model=AuthOut)
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> AuthOut:
    """
    Partial update of the caller's profile.

    A new `password` is only accepted together with the matching
    `current_password`. The response carries a fresh token.
    """
    if body.email and body.email != user.email:
        if await get_user_by_email(db, body.email):
            raise ConflictError("Email is already in use")
        user.email = body.email

    if body.password:
        if not body.current_password or not verify_password(
            body.current_password, user.password_hash
        ):
            raise BadRequestError("Current password is incorrect")
        user.password_hash = hash_password(body.password)

    if body.name is not None:
        user.name = body.name.strip()
    for field in ("bio", "avatar_url"):
        if field in body.model_fields_set:
            setattr(user, field, getattr(body, field))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email is already in use")
    return auth_payload(user)
