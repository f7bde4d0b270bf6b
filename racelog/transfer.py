"""Export a slice of a user's data graph and import it back.

An export envelope looks like::

    {
      "version": 1,
      "exportDate": "2026-05-01T10:00:00+00:00",
      "appName": "RaceLog",
      "data": {
        "cars": [...], "tracks": [...],
        "setups": [...], "sessions": [...], "cornerNotes": [...],
        "trackNotes": [...], "maintenance": [...],
        "trackImages": [{"filename": "<trackId>.png", "data": "<base64>"}]
      }
    }

The optional categories are only present when they were selected at export
time.  Records are exported verbatim, ids included; on import every record
gets a fresh id and every foreign key is remapped.  A key whose parent is
not in the file is kept when it names a parent the importing account
already owns, and nulled otherwise.

Import matches cars on (name, manufacturer, series) and tracks on
(name, location).  Under ``overwrite`` a matched parent is updated in place
and its existing dependents are replaced by the imported ones.  Under
``preserve`` a matched parent is left alone and the imported dependents that
hang off it are dropped.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections import Counter
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from racelog.cascade import cascade_on_delete
from racelog.entities import SCHEMAS, EntityKind, Record
from racelog.errors import ValidationError
from racelog.record_store import RecordStore
from racelog.repository import IMMUTABLE_FIELDS, Repository

logger = logging.getLogger(__name__)

ENVELOPE_VERSION = 1
APP_NAME = "RaceLog"
LOCAL_IMAGE_PREFIX = "/images/tracks/"

# Fields used as dict or set keys during import; must be strings or null
KEY_FIELDS = ("id", "carId", "trackId", "sessionId", "cornerName")

# Natural keys used to recognise a parent that already exists in the account
MATCH_KEYS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.CAR: ("name", "manufacturer", "series"),
    EntityKind.TRACK: ("name", "location"),
}

DEPENDENT_KINDS: tuple[EntityKind, ...] = (
    EntityKind.SETUP,
    EntityKind.SESSION,
    EntityKind.TRACK_NOTE,
    EntityKind.MAINTENANCE,
)

SUMMARY_KINDS: tuple[EntityKind, ...] = (
    EntityKind.CAR,
    EntityKind.TRACK,
    *DEPENDENT_KINDS,
    EntityKind.CORNER_NOTE,
)


class ImportMode(StrEnum):
    """Policy for parents that already exist in the importing account."""

    OVERWRITE = "overwrite"
    PRESERVE = "preserve"


@dataclass(frozen=True)
class ExportFlags:
    """Which optional categories to include alongside the selected parents."""

    setups: bool = True
    sessions: bool = True
    maintenance: bool = True
    track_notes: bool = True


@dataclass
class ImportSummary:
    """Per-kind counts of records imported and skipped."""

    imported: Counter[EntityKind] = field(default_factory=Counter)
    skipped: Counter[EntityKind] = field(default_factory=Counter)
    images: int = 0

    def to_dict(self) -> dict[str, object]:
        summary: dict[str, object] = {
            SCHEMAS[kind].data_key: {
                "imported": self.imported[kind],
                "skipped": self.skipped[kind],
            }
            for kind in SUMMARY_KINDS
        }
        summary["trackImages"] = self.images
        return summary


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _local_image_name(image_url: object) -> str | None:
    """Return the file name behind a locally stored track image URL."""
    if not isinstance(image_url, str) or not image_url.startswith(LOCAL_IMAGE_PREFIX):
        return None
    name = image_url[len(LOCAL_IMAGE_PREFIX) :]
    if not name or Path(name).name != name:
        return None
    return name


def _embed_track_images(tracks: list[Record], images_dir: Path | None) -> list[dict[str, str]]:
    """Base64-encode the locally stored image of each exported track."""
    if images_dir is None:
        return []
    images: list[dict[str, str]] = []
    for track in tracks:
        filename = _local_image_name(track.get("imageUrl"))
        if filename is None:
            continue
        try:
            raw = (images_dir / filename).read_bytes()
        except OSError:
            logger.warning("Track image %s could not be read for export", filename, exc_info=True)
            continue
        images.append({"filename": filename, "data": base64.b64encode(raw).decode("ascii")})
    return images


def export_selection(
    store: RecordStore,
    owner_id: str,
    car_ids: Collection[str],
    track_ids: Collection[str],
    flags: ExportFlags | None = None,
    images_dir: Path | None = None,
) -> dict[str, Any]:
    """Build an export envelope for the selected cars and tracks.

    Ids that are unknown or owned by another user are ignored.
    """
    flags = flags or ExportFlags()
    wanted_cars, wanted_tracks = set(car_ids), set(track_ids)

    cars = [c for c in Repository(store, EntityKind.CAR).list(owner_id) if c["id"] in wanted_cars]
    tracks = [
        t for t in Repository(store, EntityKind.TRACK).list(owner_id) if t["id"] in wanted_tracks
    ]
    selected_cars = {c["id"] for c in cars}
    selected_tracks = {t["id"] for t in tracks}

    def related(kind: EntityKind) -> list[Record]:
        return [
            r
            for r in Repository(store, kind).list(owner_id)
            if r.get("carId") in selected_cars or r.get("trackId") in selected_tracks
        ]

    data: dict[str, Any] = {"cars": cars, "tracks": tracks}
    if flags.setups:
        data["setups"] = related(EntityKind.SETUP)
    if flags.sessions:
        sessions = related(EntityKind.SESSION)
        session_ids = {s["id"] for s in sessions}
        data["sessions"] = sessions
        data["cornerNotes"] = [
            n
            for n in Repository(store, EntityKind.CORNER_NOTE).list(owner_id)
            if n.get("sessionId") in session_ids
        ]
    if flags.track_notes:
        data["trackNotes"] = related(EntityKind.TRACK_NOTE)
    if flags.maintenance:
        data["maintenance"] = [
            m
            for m in Repository(store, EntityKind.MAINTENANCE).list(owner_id)
            if m.get("carId") in selected_cars
        ]
    data["trackImages"] = _embed_track_images(tracks, images_dir)

    logger.info(
        "Exported %d car(s) and %d track(s) for user %s",
        len(cars),
        len(tracks),
        owner_id,
    )
    return {
        "version": ENVELOPE_VERSION,
        "exportDate": datetime.now(UTC).isoformat(),
        "appName": APP_NAME,
        "data": data,
    }


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def validate_envelope(envelope: object) -> Mapping[str, Any]:
    """Check the envelope structure and return its ``data`` mapping.

    Raises :class:`ValidationError` before anything is written.
    """
    if not isinstance(envelope, Mapping):
        raise ValidationError("Import file must be a JSON object")
    if "version" not in envelope or "data" not in envelope:
        raise ValidationError("Invalid export file: missing version or data")
    if envelope["version"] != ENVELOPE_VERSION:
        raise ValidationError(f"Unsupported export version: {envelope['version']!r}")

    data = envelope["data"]
    if not isinstance(data, Mapping):
        raise ValidationError("Invalid export file: data must be an object")

    list_keys = [SCHEMAS[k].data_key for k in SUMMARY_KINDS] + ["trackImages"]
    for key in list_keys:
        if key not in data:
            continue
        items = data[key]
        if not isinstance(items, list) or not all(isinstance(i, Mapping) for i in items):
            raise ValidationError(f"Invalid export file: {key} must be a list of objects")
        for item in items:
            for name in KEY_FIELDS:
                value = item.get(name)
                if value is not None and not isinstance(value, str):
                    raise ValidationError(f"Invalid export file: {key}.{name} must be a string")
    return data


def _payload(record: Mapping[str, Any]) -> Record:
    """Copy a record without the fields the importing account will assign."""
    return {k: v for k, v in record.items() if k not in IMMUTABLE_FIELDS}


class _EnvelopeImporter:
    """Holds the id maps built while importing one envelope."""

    def __init__(
        self,
        store: RecordStore,
        owner_id: str,
        mode: ImportMode,
        images_dir: Path | None,
    ) -> None:
        self.store = store
        self.owner_id = owner_id
        self.mode = mode
        self.images_dir = images_dir
        self.id_maps: dict[EntityKind, dict[str, str]] = {
            EntityKind.CAR: {},
            EntityKind.TRACK: {},
            EntityKind.SESSION: {},
        }
        self.skipped_parents: dict[EntityKind, set[str]] = {
            EntityKind.CAR: set(),
            EntityKind.TRACK: set(),
        }
        self.summary = ImportSummary()

    # -- parents -------------------------------------------------------------

    def import_parents(self, kind: EntityKind, records: list[Mapping[str, Any]]) -> None:
        repo = Repository(self.store, kind)
        id_map = self.id_maps[kind]
        for record in records:
            old_id = record.get("id")
            fields = _payload(record)
            if kind == EntityKind.TRACK and _local_image_name(fields.get("imageUrl")):
                # Points at the exporter's file; import_track_images sets it when embedded
                del fields["imageUrl"]
            key = {k: record.get(k, "") for k in MATCH_KEYS[kind]}
            match = repo.find(self.owner_id, **key)

            if match is None:
                new_id = repo.create(self.owner_id, fields)["id"]
                self.summary.imported[kind] += 1
            elif self.mode == ImportMode.OVERWRITE:
                new_id = repo.update(self.owner_id, match["id"], fields)["id"]
                self.summary.imported[kind] += 1
            else:
                new_id = match["id"]
                if old_id:
                    self.skipped_parents[kind].add(old_id)
                self.summary.skipped[kind] += 1

            if old_id:
                id_map[old_id] = new_id

    def import_track_images(self, images: list[Mapping[str, Any]]) -> None:
        """Write embedded images under the new track ids and repoint the tracks."""
        if self.images_dir is None or not images:
            return
        track_map = self.id_maps[EntityKind.TRACK]
        tracks = Repository(self.store, EntityKind.TRACK)
        self.images_dir.mkdir(parents=True, exist_ok=True)

        for image in images:
            filename = str(image.get("filename") or "")
            if not filename or Path(filename).name != filename:
                continue
            old_track_id = Path(filename).stem
            new_track_id = track_map.get(old_track_id)
            if new_track_id is None or old_track_id in self.skipped_parents[EntityKind.TRACK]:
                continue
            try:
                raw = base64.b64decode(str(image.get("data") or ""), validate=True)
            except (binascii.Error, ValueError):
                logger.warning("Skipping undecodable track image %s", filename)
                continue

            new_name = f"{new_track_id}{Path(filename).suffix}"
            (self.images_dir / new_name).write_bytes(raw)
            tracks.update(self.owner_id, new_track_id, {"imageUrl": LOCAL_IMAGE_PREFIX + new_name})
            self.summary.images += 1

    # -- dependents ----------------------------------------------------------

    def purge_replaced_dependents(self, data: Mapping[str, Any]) -> None:
        """Overwrite mode: drop existing dependents of every mapped parent."""
        car_ids = set(self.id_maps[EntityKind.CAR].values())
        track_ids = set(self.id_maps[EntityKind.TRACK].values())

        for kind in DEPENDENT_KINDS:
            schema = SCHEMAS[kind]
            if schema.data_key not in data:
                continue
            repo = Repository(self.store, kind)
            removed = repo.delete_where(self.owner_id, "carId", car_ids)
            if "trackId" in schema.foreign_keys:
                removed += repo.delete_where(self.owner_id, "trackId", track_ids)
            if kind == EntityKind.SESSION and removed:
                cascade_on_delete(
                    self.store, EntityKind.SESSION, self.owner_id, {r["id"] for r in removed}
                )
            if removed:
                logger.info("Replacing %d existing %s record(s)", len(removed), kind)

    def _remap(self, kind: EntityKind, record: Mapping[str, Any]) -> Record | None:
        """Return *record* with remapped parent ids, or None if it is dropped."""
        fields = _payload(record)
        for fk, parent in (("carId", EntityKind.CAR), ("trackId", EntityKind.TRACK)):
            if fk not in SCHEMAS[kind].foreign_keys:
                continue
            old_parent = record.get(fk)
            if not old_parent:
                fields[fk] = None
                continue
            if self.mode == ImportMode.PRESERVE and old_parent in self.skipped_parents[parent]:
                return None
            if old_parent in self.id_maps[parent]:
                fields[fk] = self.id_maps[parent][old_parent]
            elif self._owns(parent, old_parent):
                # Parent left out of the file but still live in this account
                fields[fk] = old_parent
            else:
                fields[fk] = None
        return fields

    def _owns(self, kind: EntityKind, record_id: object) -> bool:
        return Repository(self.store, kind).find(self.owner_id, id=record_id) is not None

    def import_dependents(self, kind: EntityKind, records: list[Mapping[str, Any]]) -> None:
        old_ids: list[str | None] = []
        payloads: list[Record] = []
        for record in records:
            fields = self._remap(kind, record)
            if fields is None:
                self.summary.skipped[kind] += 1
                continue
            old_ids.append(record.get("id"))
            payloads.append(fields)

        created = Repository(self.store, kind).create_many(self.owner_id, payloads)
        self.summary.imported[kind] += len(created)
        if kind in self.id_maps:
            self.id_maps[kind].update(
                (old, new["id"]) for old, new in zip(old_ids, created, strict=True) if old
            )

    def import_corner_notes(self, records: list[Mapping[str, Any]]) -> None:
        session_map = self.id_maps[EntityKind.SESSION]
        seen: set[tuple[str, Any]] = set()
        payloads: list[Record] = []
        for record in records:
            new_session_id = session_map.get(record.get("sessionId") or "")
            key = (new_session_id or "", record.get("cornerName"))
            if new_session_id is None or key in seen:
                self.summary.skipped[EntityKind.CORNER_NOTE] += 1
                continue
            seen.add(key)
            payloads.append({**_payload(record), "sessionId": new_session_id})

        created = Repository(self.store, EntityKind.CORNER_NOTE).create_many(
            self.owner_id, payloads
        )
        self.summary.imported[EntityKind.CORNER_NOTE] += len(created)

    # -- driver --------------------------------------------------------------

    def run(self, data: Mapping[str, Any]) -> ImportSummary:
        self.import_parents(EntityKind.CAR, data.get("cars") or [])
        self.import_parents(EntityKind.TRACK, data.get("tracks") or [])
        self.import_track_images(data.get("trackImages") or [])

        if self.mode == ImportMode.OVERWRITE:
            self.purge_replaced_dependents(data)

        for kind in DEPENDENT_KINDS:
            records = data.get(SCHEMAS[kind].data_key)
            if records:
                self.import_dependents(kind, records)

        if data.get("cornerNotes"):
            self.import_corner_notes(data["cornerNotes"])
        return self.summary


def import_envelope(
    store: RecordStore,
    owner_id: str,
    envelope: object,
    mode: str = ImportMode.PRESERVE,
    images_dir: Path | None = None,
) -> ImportSummary:
    """Import an export envelope into *owner_id*'s account.

    Only a structurally invalid envelope or an unknown mode raises
    :class:`ValidationError`; per-record mismatches are counted as skipped.
    """
    try:
        import_mode = ImportMode(mode)
    except ValueError:
        raise ValidationError(f"Unknown import mode: {mode!r}") from None
    data = validate_envelope(envelope)

    summary = _EnvelopeImporter(store, owner_id, import_mode, images_dir).run(data)
    logger.info("Imported envelope for user %s (%s): %s", owner_id, import_mode, summary.to_dict())
    return summary
