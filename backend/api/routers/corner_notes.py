"""Corner note endpoints (entry/apex/exit notes per corner of a session)."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response
from racelog.cascade import delete_with_cascade
from racelog.corner_notes import upsert_corner_note
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.records import CornerNoteUpsert

router = APIRouter()


@router.get("")
async def list_corner_notes(
    current_user: CurrentUser,
    store: Store,
    session_id: Annotated[str | None, Query(alias="sessionId")] = None,
) -> list[dict[str, Any]]:
    return Repository(store, EntityKind.CORNER_NOTE).list(
        current_user.user_id, sessionId=session_id
    )


@router.get("/{note_id}")
async def get_corner_note(note_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.CORNER_NOTE).get(current_user.user_id, note_id)


@router.post("")
async def save_corner_note(
    body: CornerNoteUpsert,
    response: Response,
    current_user: CurrentUser,
    store: Store,
) -> dict[str, Any]:
    """Set one field of the note for a session corner.

    Responds 201 when the note is created and 200 when an existing note is
    updated.
    """
    note, status = upsert_corner_note(
        store,
        current_user.user_id,
        body.session_id,
        body.corner_name,
        body.field,
        body.value,
    )
    response.status_code = 201 if status == "created" else 200
    return note


@router.delete("/{note_id}", status_code=204)
async def delete_corner_note(note_id: str, current_user: CurrentUser, store: Store) -> Response:
    delete_with_cascade(store, EntityKind.CORNER_NOTE, current_user.user_id, note_id)
    return Response(status_code=204)
