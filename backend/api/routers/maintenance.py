"""Car maintenance log endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query, Response
from racelog.cascade import delete_with_cascade
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.records import MaintenanceFields

router = APIRouter()


@router.get("")
async def list_maintenance(
    current_user: CurrentUser,
    store: Store,
    car_id: Annotated[str | None, Query(alias="carId")] = None,
) -> list[dict[str, Any]]:
    """List maintenance tasks; ``type`` is always returned as a list."""
    return Repository(store, EntityKind.MAINTENANCE).list(current_user.user_id, carId=car_id)


@router.get("/{task_id}")
async def get_maintenance(task_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.MAINTENANCE).get(current_user.user_id, task_id)


@router.post("", status_code=201)
async def create_maintenance(
    body: MaintenanceFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.MAINTENANCE).create(
        current_user.user_id, body.to_record()
    )


@router.put("/{task_id}")
async def update_maintenance(
    task_id: str, body: MaintenanceFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.MAINTENANCE).update(
        current_user.user_id, task_id, body.to_record()
    )


@router.delete("/{task_id}", status_code=204)
async def delete_maintenance(task_id: str, current_user: CurrentUser, store: Store) -> Response:
    delete_with_cascade(store, EntityKind.MAINTENANCE, current_user.user_id, task_id)
    return Response(status_code=204)
