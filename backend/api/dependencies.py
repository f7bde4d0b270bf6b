"""FastAPI dependency injection functions."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from racelog.accounts import get_user
from racelog.errors import NotFoundError
from racelog.record_store import RecordStore

from backend.api.config import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings."""
    return Settings()


def get_store(settings: Annotated[Settings, Depends(get_settings)]) -> RecordStore:
    """Return a record store rooted at the configured data directory."""
    return RecordStore(settings.data_dir, settings.seed_dir or None)


def get_images_dir(settings: Annotated[Settings, Depends(get_settings)]) -> Path:
    """Return the directory holding locally stored track images."""
    return Path(settings.track_images_dir)


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """The user bound to the current session cookie."""

    user_id: str
    username: str


def get_current_user(
    request: Request, store: Annotated[RecordStore, Depends(get_store)]
) -> AuthenticatedUser:
    """Return the logged-in user from the signed session cookie.

    The cookie is checked against the users collection, so a session that
    outlives its account gets a 401 and is cleared.
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        user = get_user(store, user_id)
    except NotFoundError:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Unauthorized") from None
    return AuthenticatedUser(user_id=user["id"], username=user["username"])


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
Store = Annotated[RecordStore, Depends(get_store)]
ImagesDir = Annotated[Path, Depends(get_images_dir)]
