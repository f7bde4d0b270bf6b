"""Pydantic schemas for authentication and account endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Credentials(BaseModel):
    """Request body for register and login.

    Both fields are optional so a missing one yields the same 400 message
    as an empty one.
    """

    username: str | None = None
    password: str | None = None


class UsernameUpdate(BaseModel):
    username: str | None = None


class PasswordUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_password: str | None = None
    new_password: str | None = None


class AccountDelete(BaseModel):
    password: str | None = None


class AuthStatus(BaseModel):
    """Response for ``GET /api/auth/check``."""

    authenticated: bool
    username: str | None = None


class MessageResponse(BaseModel):
    message: str
    username: str | None = None
