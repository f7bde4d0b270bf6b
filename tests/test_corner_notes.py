"""Tests for racelog.corner_notes."""

from __future__ import annotations

import pytest

from racelog.corner_notes import upsert_corner_note
from racelog.entities import EntityKind
from racelog.errors import ValidationError
from racelog.record_store import RecordStore
from racelog.repository import Repository

OWNER = "user-a"
OTHER = "user-b"


class TestUpsert:
    def test_creates_with_one_field(self, store: RecordStore) -> None:
        note, status = upsert_corner_note(store, OWNER, "s1", "Copse", "entry", "brake at 100")
        assert status == "created"
        assert note["entry"] == "brake at 100"
        assert note["apex"] == ""
        assert note["exit"] == ""
        assert note["userId"] == OWNER

    def test_updates_only_the_named_field(self, store: RecordStore) -> None:
        upsert_corner_note(store, OWNER, "s1", "Copse", "entry", "brake at 100")
        note, status = upsert_corner_note(store, OWNER, "s1", "Copse", "exit", "full throttle")
        assert status == "updated"
        assert note["entry"] == "brake at 100"
        assert note["exit"] == "full throttle"

    def test_repeated_calls_keep_one_note(self, store: RecordStore) -> None:
        for field in ("entry", "apex", "exit", "apex"):
            upsert_corner_note(store, OWNER, "s1", "Maggotts", field, field.upper())
        notes = Repository(store, EntityKind.CORNER_NOTE).list(OWNER)
        assert len(notes) == 1
        assert (notes[0]["entry"], notes[0]["apex"], notes[0]["exit"]) == (
            "ENTRY",
            "APEX",
            "EXIT",
        )

    def test_missing_value_clears_field(self, store: RecordStore) -> None:
        upsert_corner_note(store, OWNER, "s1", "Copse", "apex", "clip kerb")
        note, _ = upsert_corner_note(store, OWNER, "s1", "Copse", "apex", None)
        assert note["apex"] == ""

    def test_no_field_creates_empty_note(self, store: RecordStore) -> None:
        note, status = upsert_corner_note(store, OWNER, "s1", "Stowe", None)
        assert status == "created"
        assert (note["entry"], note["apex"], note["exit"]) == ("", "", "")

    def test_no_field_returns_existing_unchanged(self, store: RecordStore) -> None:
        created, _ = upsert_corner_note(store, OWNER, "s1", "Stowe", "entry", "late")
        note, status = upsert_corner_note(store, OWNER, "s1", "Stowe", None)
        assert status == "updated"
        assert note == created

    def test_distinct_corners_are_distinct_notes(self, store: RecordStore) -> None:
        upsert_corner_note(store, OWNER, "s1", "Copse", "entry", "a")
        upsert_corner_note(store, OWNER, "s1", "Becketts", "entry", "b")
        upsert_corner_note(store, OWNER, "s2", "Copse", "entry", "c")
        assert len(Repository(store, EntityKind.CORNER_NOTE).list(OWNER)) == 3

    def test_owners_do_not_share_notes(self, store: RecordStore) -> None:
        upsert_corner_note(store, OWNER, "s1", "Copse", "entry", "mine")
        _, status = upsert_corner_note(store, OTHER, "s1", "Copse", "entry", "theirs")
        assert status == "created"


class TestValidation:
    @pytest.mark.parametrize(
        ("session_id", "corner_name"),
        [(None, "Copse"), ("s1", None), ("", "Copse"), ("s1", "")],
    )
    def test_requires_session_and_corner(
        self, store: RecordStore, session_id: str | None, corner_name: str | None
    ) -> None:
        with pytest.raises(ValidationError, match="sessionId and cornerName are required"):
            upsert_corner_note(store, OWNER, session_id, corner_name, "entry", "x")

    def test_rejects_unknown_field(self, store: RecordStore) -> None:
        with pytest.raises(ValidationError, match="entry, apex, exit"):
            upsert_corner_note(store, OWNER, "s1", "Copse", "braking", "x")
        assert Repository(store, EntityKind.CORNER_NOTE).list(OWNER) == []
