"""Setup CRUD endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response
from racelog.cascade import delete_with_cascade
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.records import SetupFields

router = APIRouter()


@router.get("")
async def list_setups(
    current_user: CurrentUser,
    store: Store,
    car_id: Annotated[str | None, Query(alias="carId")] = None,
    track_id: Annotated[str | None, Query(alias="trackId")] = None,
) -> list[dict[str, Any]]:
    """List the current user's setups, optionally for one car and/or track."""
    return Repository(store, EntityKind.SETUP).list(
        current_user.user_id, carId=car_id, trackId=track_id
    )


@router.get("/{setup_id}")
async def get_setup(setup_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.SETUP).get(current_user.user_id, setup_id)


@router.post("", status_code=201)
async def create_setup(
    body: SetupFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.SETUP).create(current_user.user_id, body.to_record())


@router.put("/{setup_id}")
async def update_setup(
    setup_id: str, body: SetupFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.SETUP).update(
        current_user.user_id, setup_id, body.to_record()
    )


@router.delete("/{setup_id}", status_code=204)
async def delete_setup(setup_id: str, current_user: CurrentUser, store: Store) -> Response:
    delete_with_cascade(store, EntityKind.SETUP, current_user.user_id, setup_id)
    return Response(status_code=204)
