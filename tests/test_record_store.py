"""Tests for racelog.record_store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from racelog.errors import CorruptStoreError
from racelog.record_store import RecordStore


class TestLoad:
    def test_missing_collection_is_created_empty(self, tmp_path: Path) -> None:
        store = RecordStore(tmp_path / "data")
        assert store.load("cars") == []
        assert json.loads((tmp_path / "data" / "cars.json").read_text()) == []

    def test_data_dir_is_created(self, tmp_path: Path) -> None:
        RecordStore(tmp_path / "nested" / "data")
        assert (tmp_path / "nested" / "data").is_dir()

    def test_seeded_from_default_file(self, tmp_path: Path) -> None:
        seed_dir = tmp_path / "seed"
        seed_dir.mkdir()
        seeded = [{"id": "t1", "userId": "u1", "name": "Silverstone"}]
        (seed_dir / "tracks.json").write_text(json.dumps(seeded))

        store = RecordStore(tmp_path / "data", seed_dir=seed_dir)
        assert store.load("tracks") == seeded
        assert (tmp_path / "data" / "tracks.json").is_file()

    def test_seed_dir_without_matching_file_starts_empty(self, tmp_path: Path) -> None:
        seed_dir = tmp_path / "seed"
        seed_dir.mkdir()
        store = RecordStore(tmp_path / "data", seed_dir=seed_dir)
        assert store.load("setups") == []

    def test_seed_is_only_used_once(self, tmp_path: Path) -> None:
        seed_dir = tmp_path / "seed"
        seed_dir.mkdir()
        (seed_dir / "cars.json").write_text('[{"id": "c1"}]')
        store = RecordStore(tmp_path / "data", seed_dir=seed_dir)
        store.load("cars")
        store.save("cars", [])
        assert store.load("cars") == []

    def test_preserves_order(self, store: RecordStore) -> None:
        records = [{"id": str(i)} for i in range(5)]
        store.save("cars", records)
        assert [r["id"] for r in store.load("cars")] == ["0", "1", "2", "3", "4"]


class TestCorruption:
    def test_invalid_json_raises(self, store: RecordStore) -> None:
        store.path_for("cars").write_text("{not json")
        with pytest.raises(CorruptStoreError) as excinfo:
            store.load("cars")
        assert excinfo.value.path == store.path_for("cars")

    def test_non_array_raises(self, store: RecordStore) -> None:
        store.path_for("cars").write_text('{"id": "c1"}')
        with pytest.raises(CorruptStoreError, match="expected a JSON array"):
            store.load("cars")

    def test_non_object_elements_raise(self, store: RecordStore) -> None:
        store.path_for("cars").write_text("[1, 2]")
        with pytest.raises(CorruptStoreError, match="array of objects"):
            store.load("cars")

    def test_corrupt_file_is_left_untouched(self, store: RecordStore) -> None:
        store.path_for("cars").write_text("garbage")
        with pytest.raises(CorruptStoreError):
            store.load("cars")
        assert store.path_for("cars").read_text() == "garbage"


class TestSave:
    def test_overwrites_whole_collection(self, store: RecordStore) -> None:
        store.save("cars", [{"id": "a"}, {"id": "b"}])
        store.save("cars", [{"id": "c"}])
        assert store.load("cars") == [{"id": "c"}]

    def test_writes_pretty_json(self, store: RecordStore) -> None:
        store.save("cars", [{"id": "a"}])
        assert store.path_for("cars").read_text() == json.dumps([{"id": "a"}], indent=2)
