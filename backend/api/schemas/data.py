"""Pydantic schemas for export, import and bulk delete."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExportRequest(BaseModel):
    """Selection of cars and tracks plus the optional categories to bundle."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    car_ids: list[str] = Field(default_factory=list)
    track_ids: list[str] = Field(default_factory=list)
    include_setups: bool = True
    include_sessions: bool = True
    include_maintenance: bool = True
    include_track_notes: bool = True


class ImportRequest(BaseModel):
    """An export envelope and the policy for parents that already exist.

    The envelope is left untyped here; its structure is checked by the
    import routine so malformed files get a descriptive 400.
    """

    envelope: Any = None
    mode: str = "preserve"


class BulkDeleteRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    car_ids: list[str] = Field(default_factory=list)
    track_ids: list[str] = Field(default_factory=list)
