"""Track session CRUD endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response
from racelog.cascade import delete_with_cascade
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.records import SessionFields

router = APIRouter()


@router.get("")
async def list_sessions(
    current_user: CurrentUser,
    store: Store,
    car_id: Annotated[str | None, Query(alias="carId")] = None,
    track_id: Annotated[str | None, Query(alias="trackId")] = None,
) -> list[dict[str, Any]]:
    """List the current user's sessions, optionally for one car and/or track."""
    return Repository(store, EntityKind.SESSION).list(
        current_user.user_id, carId=car_id, trackId=track_id
    )


@router.get("/{session_id}")
async def get_session(session_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.SESSION).get(current_user.user_id, session_id)


@router.post("", status_code=201)
async def create_session(
    body: SessionFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    """Create a session; an unnamed session is named after its type."""
    return Repository(store, EntityKind.SESSION).create(current_user.user_id, body.to_record())


@router.put("/{session_id}")
async def update_session(
    session_id: str, body: SessionFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.SESSION).update(
        current_user.user_id, session_id, body.to_record()
    )


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, current_user: CurrentUser, store: Store) -> Response:
    """Delete a session and its corner notes."""
    delete_with_cascade(store, EntityKind.SESSION, current_user.user_id, session_id)
    return Response(status_code=204)
