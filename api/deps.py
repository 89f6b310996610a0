"""
Shared FastAPI dependencies.

Usage:
    @router.get("/profile")
    async def profile(user: User = Depends(get_current_user)): ...
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import jwt
from fastapi import Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import BadRequestError, ForbiddenError, UnauthorizedError
from config import settings
from services.auth import verify_token
from services.db import User, get_session

_LOG = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

ModelT = TypeVar("ModelT", bound=BaseModel)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    if credentials is None:
        raise UnauthorizedError("Not authorized, no token")

    try:
        user_id = verify_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        _LOG.debug("rejected token: %s", exc)
        raise UnauthorizedError("Not authorized, token failed") from exc

    user = await db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Not authorized, token failed")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError("Not authorized as an admin")
    return user


@dataclass
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> Pagination:
    size = min(limit or settings.default_page_size, settings.max_page_size)
    return Pagination(page=page, limit=size)


async def read_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Parse a JSON *or* urlencoded/multipart body into `model`.

    Plain HTML forms post `application/x-www-form-urlencoded`, API clients
    post JSON; both land in the same schema.
    """
    content_type = request.headers.get("content-type", "")
    data: Any
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        data = {k: v for k, v in form.items() if isinstance(v, str)}
    else:
        try:
            data = await request.json()
        except ValueError as exc:
            raise BadRequestError("Request body must be valid JSON") from exc

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc
