"""Owner-scoped repositories over the record store.

A :class:`Repository` wraps one collection of the :class:`RecordStore` and
only ever exposes records whose ``userId`` matches the caller.  A record
owned by someone else is indistinguishable from a missing one.
"""

from __future__ import annotations

import uuid
from collections.abc import Collection, Iterable, Mapping
from typing import Any

from racelog.entities import SCHEMAS, EntityKind, EntitySchema, Record
from racelog.errors import NotFoundError
from racelog.record_store import RecordStore

IMMUTABLE_FIELDS: tuple[str, ...] = ("id", "userId")


def new_id() -> str:
    """Generate a fresh opaque record identifier."""
    return str(uuid.uuid4())


class Repository:
    """CRUD for one owned entity kind."""

    def __init__(self, store: RecordStore, kind: EntityKind) -> None:
        schema = SCHEMAS[kind]
        if not schema.owned:
            raise ValueError(f"{kind} records are not owner-scoped")
        self.store = store
        self.schema: EntitySchema = schema

    @property
    def kind(self) -> EntityKind:
        return self.schema.kind

    # -- persistence ---------------------------------------------------------

    def _load(self) -> list[Record]:
        records = self.store.load(self.schema.collection)
        if self.schema.normalize is not None:
            records = [self.schema.normalize(r) for r in records]
        return records

    def _save(self, records: list[Record]) -> None:
        self.store.save(self.schema.collection, records)

    def _index(self, records: list[Record], owner_id: str, record_id: str) -> int:
        for i, record in enumerate(records):
            if record.get("id") == record_id and record.get("userId") == owner_id:
                return i
        raise NotFoundError(self.schema.label, record_id)

    def _build(self, owner_id: str, fields: Mapping[str, Any]) -> Record:
        """Merge caller fields over the kind's defaults and stamp id/owner."""
        body = self.schema.defaults()
        for key, value in fields.items():
            if key in IMMUTABLE_FIELDS:
                continue
            if value is None and key in body:
                continue
            body[key] = value
        if self.schema.on_create is not None:
            self.schema.on_create(body)
        if self.schema.normalize is not None:
            body = self.schema.normalize(body)
        return {"id": new_id(), "userId": owner_id, **body}

    # -- public CRUD ---------------------------------------------------------

    def list(self, owner_id: str, **filters: Any) -> list[Record]:
        """Return the owner's records matching every non-None filter."""
        active = {k: v for k, v in filters.items() if v is not None}
        return [
            r
            for r in self._load()
            if r.get("userId") == owner_id and all(r.get(k) == v for k, v in active.items())
        ]

    def get(self, owner_id: str, record_id: str) -> Record:
        """Return one record, or raise :class:`NotFoundError`."""
        records = self._load()
        return records[self._index(records, owner_id, record_id)]

    def find(self, owner_id: str, **match: Any) -> Record | None:
        """Return the first owned record whose fields equal *match*, if any."""
        for record in self._load():
            if record.get("userId") == owner_id and all(
                record.get(k) == v for k, v in match.items()
            ):
                return record
        return None

    def create(self, owner_id: str, fields: Mapping[str, Any]) -> Record:
        """Create a record; client-supplied ``id``/``userId`` are ignored."""
        record = self._build(owner_id, fields)
        records = self._load()
        records.append(record)
        self._save(records)
        return record

    def create_many(self, owner_id: str, items: Iterable[Mapping[str, Any]]) -> list[Record]:
        """Create several records with a single collection write."""
        created = [self._build(owner_id, fields) for fields in items]
        if created:
            records = self._load()
            records.extend(created)
            self._save(records)
        return created

    def update(self, owner_id: str, record_id: str, partial: Mapping[str, Any]) -> Record:
        """Shallow-merge *partial* into a record.

        Every key present in *partial* overwrites the stored value, explicit
        ``None`` included.  ``id`` and ``userId`` always keep their stored
        values.
        """
        records = self._load()
        index = self._index(records, owner_id, record_id)
        existing = records[index]
        merged = {
            **existing,
            **partial,
            "id": existing["id"],
            "userId": existing["userId"],
        }
        if self.schema.normalize is not None:
            merged = self.schema.normalize(merged)
        records[index] = merged
        self._save(records)
        return merged

    def delete(self, owner_id: str, record_id: str) -> Record:
        """Remove exactly one owned record and return it."""
        records = self._load()
        index = self._index(records, owner_id, record_id)
        removed = records.pop(index)
        self._save(records)
        return removed

    # -- bulk helpers used by cascades and import ----------------------------

    def delete_where(self, owner_id: str, field: str, values: Collection[str]) -> list[Record]:
        """Delete owned records whose *field* is in *values*; return them."""
        if not values:
            return []
        records = self._load()
        kept: list[Record] = []
        removed: list[Record] = []
        for record in records:
            if record.get("userId") == owner_id and record.get(field) in values:
                removed.append(record)
            else:
                kept.append(record)
        if removed:
            self._save(kept)
        return removed

    def nullify_where(self, owner_id: str, field: str, values: Collection[str]) -> int:
        """Set *field* to ``None`` on owned records where it is in *values*."""
        if not values:
            return 0
        records = self._load()
        count = 0
        for i, record in enumerate(records):
            if record.get("userId") == owner_id and record.get(field) in values:
                records[i] = {**record, field: None}
                count += 1
        if count:
            self._save(records)
        return count

    def purge_owner(self, owner_id: str) -> int:
        """Delete every record belonging to *owner_id*."""
        records = self._load()
        kept = [r for r in records if r.get("userId") != owner_id]
        removed = len(records) - len(kept)
        if removed:
            self._save(kept)
        return removed
