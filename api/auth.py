from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, read_body
from api.errors import ConflictError, UnauthorizedError
from api.schemas import AuthOut, LoginIn, RegisterIn, UserOut
from services.auth import create_token, hash_password, verify_password
from services.db import User, get_session, get_user_by_email

_LOG = logging.getLogger(__name__)

router = APIRouter()


def auth_payload(user: User) -> AuthOut:
    return AuthOut(
        **UserOut.model_validate(user, from_attributes=True).model_dump(),
        token=create_token(user.id),
    )


# ───────────────────────── register ─────────────────────────
@router.post(
    "/register",
    response_model=AuthOut,
    status_code=status.HTTP_201_CREATED,
    openapi_extra={"requestBody": {"content": {
        "application/json": {"schema": RegisterIn.model_json_schema()},
        "application/x-www-form-urlencoded": {"schema": RegisterIn.model_json_schema()},
    }}},
)
async def register(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> AuthOut:
    body = await read_body(request, RegisterIn)

    if await get_user_by_email(db, body.email):
        raise ConflictError("User already exists")

    user = User(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        role="user",
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("User already exists")
    _LOG.info("registered user %s (%s)", user.id, user.email)
    return auth_payload(user)


# ───────────────────────── login ────────────────────────────
@router.post(
    "/login",
    response_model=AuthOut,
    openapi_extra={"requestBody": {"content": {
        "application/json": {"schema": LoginIn.model_json_schema()},
        "application/x-www-form-urlencoded": {"schema": LoginIn.model_json_schema()},
    }}},
)
async def login(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> AuthOut:
    body = await read_body(request, LoginIn)

    user = await get_user_by_email(db, body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")
    return auth_payload(user)


# ───────────────────────── me ───────────────────────────────
@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(user, from_attributes=True)
