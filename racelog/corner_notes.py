"""Create-or-merge for corner notes keyed on (session, corner name).

A driver fills in entry/apex/exit notes one field at a time from the session
view, so the natural key is the corner within the session rather than the
record id.  Each call sets a single field and leaves the other two alone.
"""

from __future__ import annotations

from typing import Literal

from racelog.entities import CornerField, EntityKind, Record
from racelog.errors import ValidationError
from racelog.record_store import RecordStore
from racelog.repository import Repository

UpsertStatus = Literal["created", "updated"]


def _parse_field(field: str | None) -> CornerField | None:
    if field is None:
        return None
    try:
        return CornerField(field)
    except ValueError:
        allowed = ", ".join(f.value for f in CornerField)
        raise ValidationError(f"field must be one of: {allowed}") from None


def upsert_corner_note(
    store: RecordStore,
    owner_id: str,
    session_id: str | None,
    corner_name: str | None,
    field: str | None,
    value: str | None = None,
) -> tuple[Record, UpsertStatus]:
    """Set one field of the note for ``(session_id, corner_name)``.

    Returns the full record and ``"created"`` or ``"updated"``.  The session
    is not looked up; session deletion cleans up its notes later.
    """
    if not session_id or not corner_name:
        raise ValidationError("sessionId and cornerName are required")
    corner_field = _parse_field(field)

    repo = Repository(store, EntityKind.CORNER_NOTE)
    existing = repo.find(owner_id, sessionId=session_id, cornerName=corner_name)

    if existing is not None:
        if corner_field is None:
            return existing, "updated"
        updated = repo.update(owner_id, existing["id"], {corner_field.value: value or ""})
        return updated, "updated"

    fields: Record = {"sessionId": session_id, "cornerName": corner_name}
    if corner_field is not None:
        fields[corner_field.value] = value or ""
    created = repo.create(owner_id, fields)
    return created, "created"
