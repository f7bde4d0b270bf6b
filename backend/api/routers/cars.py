"""Car CRUD endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Response
from racelog.cascade import delete_with_cascade
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, Store
from backend.api.schemas.records import CarFields

router = APIRouter()


@router.get("")
async def list_cars(current_user: CurrentUser, store: Store) -> list[dict[str, Any]]:
    """List the current user's cars."""
    return Repository(store, EntityKind.CAR).list(current_user.user_id)


@router.get("/{car_id}")
async def get_car(car_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.CAR).get(current_user.user_id, car_id)


@router.post("", status_code=201)
async def create_car(body: CarFields, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.CAR).create(current_user.user_id, body.to_record())


@router.put("/{car_id}")
async def update_car(
    car_id: str, body: CarFields, current_user: CurrentUser, store: Store
) -> dict[str, Any]:
    return Repository(store, EntityKind.CAR).update(current_user.user_id, car_id, body.to_record())


@router.delete("/{car_id}", status_code=204)
async def delete_car(car_id: str, current_user: CurrentUser, store: Store) -> Response:
    """Delete a car with its setups, sessions, track notes and maintenance."""
    delete_with_cascade(store, EntityKind.CAR, current_user.user_id, car_id)
    return Response(status_code=204)
