"""Entity kinds, their collections and their creation defaults.

Records are plain JSON objects (camelCase keys, as stored on disk and sent
over the wire).  Each kind has an :class:`EntitySchema` describing where it
is stored, which fields default to what on creation, and which fields hold
foreign keys.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any

Record = dict[str, Any]

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EntityKind(StrEnum):
    """Every kind of record RaceLog persists."""

    USER = "user"
    CAR = "car"
    TRACK = "track"
    SETUP = "setup"
    SESSION = "session"
    CORNER_NOTE = "corner_note"
    TRACK_NOTE = "track_note"
    MAINTENANCE = "maintenance"


class CornerField(StrEnum):
    """The three phases of a corner a note can be written for."""

    ENTRY = "entry"
    APEX = "apex"
    EXIT = "exit"


# ---------------------------------------------------------------------------
# Default factories
# ---------------------------------------------------------------------------


def _today() -> str:
    return date.today().isoformat()


def _wheel_map() -> dict[str, float]:
    return {"fl": 0, "fr": 0, "rl": 0, "rr": 0}


def _car_defaults() -> Record:
    return {"name": "", "manufacturer": "", "series": ""}


def _track_defaults() -> Record:
    return {
        "name": "",
        "location": "",
        "length": "",
        "imageUrl": "",
        "corners": [],
        "circuitNotes": "",
    }


def _setup_defaults() -> Record:
    return {
        "carId": None,
        "trackId": None,
        "name": "",
        "date": _today(),
        "toeFront": "",
        "toeRear": "",
        "camberFront": "",
        "camberRear": "",
        "casterFront": "",
        "cornerWeights": _wheel_map(),
        "totalWeight": 0,
        "rideHeightFront": "",
        "rideHeightRear": "",
        "antiRollBarFront": "",
        "antiRollBarRear": "",
        "tyrePressures": _wheel_map(),
        "fuelQuantity": "",
        "tyreMake": "",
        "notes": "",
    }


def _session_defaults() -> Record:
    return {
        "carId": None,
        "trackId": None,
        "type": "",
        "name": "",
        "date": _today(),
        "trackConditions": "",
        "tyrePressures": None,
        "frontARB": "",
        "rearARB": "",
        "brakeBias": "",
        "setupComments": "",
        "bestLaptime": "",
        "focusAreas": "",
    }


def _corner_note_defaults() -> Record:
    return {"sessionId": None, "cornerName": "", "entry": "", "apex": "", "exit": ""}


def _track_note_defaults() -> Record:
    return {"carId": None, "trackId": None, "notes": ""}


def _maintenance_defaults() -> Record:
    return {
        "carId": None,
        "date": _today(),
        "type": [],
        "name": "",
        "description": "",
        "cost": 0,
        "mileage": "",
        "partsUsed": "",
        "notes": "",
    }


def _user_defaults() -> Record:
    return {"username": "", "passwordHash": "", "createdAt": ""}


# ---------------------------------------------------------------------------
# Per-kind hooks
# ---------------------------------------------------------------------------


def _session_name_from_type(record: Record) -> None:
    """A session without a name is named after its type ("Practice", ...)."""
    if not record.get("name"):
        record["name"] = record.get("type") or ""


def normalize_maintenance(record: Record) -> Record:
    """Accept the legacy single-string ``type`` shape and return the list shape."""
    task_type = record.get("type")
    if isinstance(task_type, str):
        record = {**record, "type": [task_type] if task_type else []}
    elif task_type is None:
        record = {**record, "type": []}
    return record


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntitySchema:
    """Storage and defaulting rules for one entity kind."""

    kind: EntityKind
    collection: str  # file stem under the data directory
    data_key: str  # key in export envelopes and summaries
    label: str  # human-readable name used in error messages
    defaults: Callable[[], Record]
    foreign_keys: tuple[str, ...] = ()
    owned: bool = True
    on_create: Callable[[Record], None] | None = None
    normalize: Callable[[Record], Record] | None = None


SCHEMAS: dict[EntityKind, EntitySchema] = {
    EntityKind.USER: EntitySchema(
        kind=EntityKind.USER,
        collection="users",
        data_key="users",
        label="User",
        defaults=_user_defaults,
        owned=False,
    ),
    EntityKind.CAR: EntitySchema(
        kind=EntityKind.CAR,
        collection="cars",
        data_key="cars",
        label="Car",
        defaults=_car_defaults,
    ),
    EntityKind.TRACK: EntitySchema(
        kind=EntityKind.TRACK,
        collection="tracks",
        data_key="tracks",
        label="Track",
        defaults=_track_defaults,
    ),
    EntityKind.SETUP: EntitySchema(
        kind=EntityKind.SETUP,
        collection="setups",
        data_key="setups",
        label="Setup",
        defaults=_setup_defaults,
        foreign_keys=("carId", "trackId"),
    ),
    EntityKind.SESSION: EntitySchema(
        kind=EntityKind.SESSION,
        collection="sessions",
        data_key="sessions",
        label="Session",
        defaults=_session_defaults,
        foreign_keys=("carId", "trackId"),
        on_create=_session_name_from_type,
    ),
    EntityKind.CORNER_NOTE: EntitySchema(
        kind=EntityKind.CORNER_NOTE,
        collection="corner-notes",
        data_key="cornerNotes",
        label="Corner note",
        defaults=_corner_note_defaults,
        foreign_keys=("sessionId",),
    ),
    EntityKind.TRACK_NOTE: EntitySchema(
        kind=EntityKind.TRACK_NOTE,
        collection="track-notes",
        data_key="trackNotes",
        label="Track note",
        defaults=_track_note_defaults,
        foreign_keys=("carId", "trackId"),
    ),
    EntityKind.MAINTENANCE: EntitySchema(
        kind=EntityKind.MAINTENANCE,
        collection="maintenance",
        data_key="maintenance",
        label="Maintenance task",
        defaults=_maintenance_defaults,
        foreign_keys=("carId",),
        normalize=normalize_maintenance,
    ),
}

# Which parent kind each foreign-key field points at
FOREIGN_KEY_TARGETS: dict[str, EntityKind] = {
    "carId": EntityKind.CAR,
    "trackId": EntityKind.TRACK,
    "sessionId": EntityKind.SESSION,
}

# Owned kinds, children before parents
OWNED_KINDS: tuple[EntityKind, ...] = (
    EntityKind.CORNER_NOTE,
    EntityKind.TRACK_NOTE,
    EntityKind.MAINTENANCE,
    EntityKind.SESSION,
    EntityKind.SETUP,
    EntityKind.TRACK,
    EntityKind.CAR,
)
