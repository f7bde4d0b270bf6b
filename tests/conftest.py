"""Shared test fixtures for the RaceLog core tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from racelog.entities import EntityKind, Record
from racelog.record_store import RecordStore
from racelog.repository import Repository

OWNER = "user-a"
OTHER = "user-b"


@pytest.fixture()
def store(tmp_path: Path) -> RecordStore:
    """An empty record store in a temporary data directory."""
    return RecordStore(tmp_path / "data")


@pytest.fixture()
def images_dir(tmp_path: Path) -> Path:
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture()
def garage(store: RecordStore) -> dict[str, Record]:
    """One car and one track with a record of every dependent kind.

    The session has a corner note, so every cascade rule has something to
    act on.
    """
    car = Repository(store, EntityKind.CAR).create(
        OWNER, {"name": "Clio Cup", "manufacturer": "Renault", "series": "Clio Cup UK"}
    )
    track = Repository(store, EntityKind.TRACK).create(
        OWNER, {"name": "Brands Hatch", "location": "Kent", "corners": ["Paddock Hill", "Druids"]}
    )
    setup = Repository(store, EntityKind.SETUP).create(
        OWNER, {"carId": car["id"], "trackId": track["id"], "name": "Dry baseline"}
    )
    session = Repository(store, EntityKind.SESSION).create(
        OWNER, {"carId": car["id"], "trackId": track["id"], "type": "Qualifying"}
    )
    corner_note = Repository(store, EntityKind.CORNER_NOTE).create(
        OWNER, {"sessionId": session["id"], "cornerName": "Druids", "apex": "late apex"}
    )
    track_note = Repository(store, EntityKind.TRACK_NOTE).create(
        OWNER, {"carId": car["id"], "trackId": track["id"], "notes": "kerbs are fine"}
    )
    maintenance = Repository(store, EntityKind.MAINTENANCE).create(
        OWNER, {"carId": car["id"], "type": ["Oil change"], "cost": 80}
    )
    return {
        "car": car,
        "track": track,
        "setup": setup,
        "session": session,
        "corner_note": corner_note,
        "track_note": track_note,
        "maintenance": maintenance,
    }
