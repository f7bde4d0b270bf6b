"""Pydantic schemas for the record CRUD endpoints.

Every field is optional: the same model serves create (absent fields take
their defaults) and partial update (absent fields are left alone).  Records
travel as camelCase JSON, so fields are aliased with ``to_camel``.  Unknown
keys are kept so records written by newer clients survive a round trip.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordFields(BaseModel):
    """Base for request bodies that become stored records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_record(self) -> dict[str, Any]:
        """Return only the keys the client actually sent, in wire casing."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CarFields(RecordFields):
    name: str | None = None
    manufacturer: str | None = None
    series: str | None = None


class TrackFields(RecordFields):
    name: str | None = None
    location: str | None = None
    length: str | float | None = None
    image_url: str | None = None
    corners: list[Any] | None = None
    circuit_notes: str | None = None


class SetupFields(RecordFields):
    car_id: str | None = None
    track_id: str | None = None
    name: str | None = None
    date: str | None = None
    toe_front: str | None = None
    toe_rear: str | None = None
    camber_front: str | None = None
    camber_rear: str | None = None
    caster_front: str | None = None
    corner_weights: dict[str, Any] | None = None
    total_weight: float | str | None = None
    ride_height_front: str | None = None
    ride_height_rear: str | None = None
    anti_roll_bar_front: str | None = None
    anti_roll_bar_rear: str | None = None
    tyre_pressures: dict[str, Any] | None = None
    fuel_quantity: str | float | None = None
    tyre_make: str | None = None
    notes: str | None = None


class SessionFields(RecordFields):
    car_id: str | None = None
    track_id: str | None = None
    type: str | None = None
    name: str | None = None
    date: str | None = None
    track_conditions: str | None = None
    tyre_pressures: dict[str, Any] | None = None
    front_arb: str | None = Field(default=None, alias="frontARB")
    rear_arb: str | None = Field(default=None, alias="rearARB")
    brake_bias: str | None = None
    setup_comments: str | None = None
    best_laptime: str | None = None
    focus_areas: str | None = None


class TrackNoteFields(RecordFields):
    car_id: str | None = None
    track_id: str | None = None
    notes: str | None = None


class MaintenanceFields(RecordFields):
    car_id: str | None = None
    date: str | None = None
    type: list[str] | str | None = None
    name: str | None = None
    description: str | None = None
    cost: float | None = None
    mileage: str | float | None = None
    parts_used: str | None = None
    notes: str | None = None


class CornerNoteUpsert(BaseModel):
    """Request body for the corner-note upsert endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str | None = None
    corner_name: str | None = None
    field: str | None = None
    value: str | None = None
