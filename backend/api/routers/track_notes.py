"""Per car-and-track note endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response
from racelog.cascade import delete_with_cascade
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.records import TrackNoteFields

router = APIRouter()


@router.get("")
async def list_track_notes(
    current_user: CurrentUser,
    store: Store,
    car_id: Annotated[str | None, Query(alias="carId")] = None,
    track_id: Annotated[str | None, Query(alias="trackId")] = None,
) -> list[dict[str, Any]]:
    return Repository(store, EntityKind.TRACK_NOTE).list(
        current_user.user_id, carId=car_id, trackId=track_id
    )


@router.get("/{note_id}")
async def get_track_note(note_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.TRACK_NOTE).get(current_user.user_id, note_id)


@router.post("", status_code=201)
async def create_track_note(
    body: TrackNoteFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.TRACK_NOTE).create(
        current_user.user_id, body.to_record()
    )


@router.put("/{note_id}")
async def update_track_note(
    note_id: str, body: TrackNoteFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.TRACK_NOTE).update(
        current_user.user_id, note_id, body.to_record()
    )


@router.delete("/{note_id}", status_code=204)
async def delete_track_note(note_id: str, current_user: CurrentUser, store: Store) -> Response:
    delete_with_cascade(store, EntityKind.TRACK_NOTE, current_user.user_id, note_id)
    return Response(status_code=204)
