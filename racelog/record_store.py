"""JSON-file record store.

Every entity kind lives in one JSON array file under ``data_dir``
(``cars.json``, ``corner-notes.json``, ...).  Reads and writes are always
whole-collection: callers load the list, mutate it in memory and save it
back.  There is no locking and no cross-file atomicity; two ``save`` calls
are two independent file writes.

On first access a missing collection is created on disk.  If a seed
directory is configured and holds a file of the same name, that file is
copied verbatim instead of starting from an empty array.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from racelog.errors import CorruptStoreError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class RecordStore:
    """Load/save named collections of records as JSON arrays on disk."""

    def __init__(self, data_dir: str | Path, seed_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir)
        self.seed_dir = Path(seed_dir) if seed_dir else None
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, collection: str) -> Path:
        """Return the file backing *collection*."""
        return self.data_dir / f"{collection}.json"

    def _initialise(self, path: Path, collection: str) -> None:
        """Create a missing collection file, seeding it when a default exists."""
        if self.seed_dir is not None:
            seed = self.seed_dir / path.name
            if seed.is_file():
                shutil.copyfile(seed, path)
                logger.info("Seeded collection %s from %s", collection, seed)
                return
        path.write_text("[]", encoding="utf-8")
        logger.info("Initialised empty collection %s", collection)

    def load(self, collection: str) -> list[Record]:
        """Return all records of *collection* in stored order.

        Raises :class:`CorruptStoreError` if the file is not a JSON array of
        objects.
        """
        path = self.path_for(collection)
        if not path.exists():
            self._initialise(path, collection)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptStoreError(path, str(exc)) from exc

        if not isinstance(data, list):
            raise CorruptStoreError(path, f"expected a JSON array, got {type(data).__name__}")
        if not all(isinstance(record, dict) for record in data):
            raise CorruptStoreError(path, "expected an array of objects")
        return data

    def save(self, collection: str, records: list[Record]) -> None:
        """Overwrite *collection* with *records*."""
        path = self.path_for(collection)
        path.write_text(json.dumps(records, indent=2), encoding="utf-8")
