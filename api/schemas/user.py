from __future__ import annotations
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Role = Literal["user", "admin"]


def _lower(value: object) -> object:
    return value.strip().lower() if isinstance(value, str) else value


class RegisterIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, v: object) -> object:
        return _lower(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v


class LoginIn(BaseModel):
    email: str
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthOut(UserOut):
    """User plus a bearer token for the `Authorization` header."""
    token: str


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    email: EmailStr | None = None
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, max_length=500)
    password: str | None = Field(None, min_length=6, max_length=72)
    current_password: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, v: object) -> object:
        return _lower(v)


class RoleUpdate(BaseModel):
    role: Role
