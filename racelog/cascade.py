"""Referential rules between entity kinds and the cascades they trigger.

There is no database enforcing foreign keys, so every parent deletion has to
walk the rules below and clean up its children explicitly.  The rule table is
static and total: every foreign-key field of every schema appears in it
exactly once.

=========  ===========  ==========  =========
Parent     Child        Key         Effect
=========  ===========  ==========  =========
Car        Setup        carId       delete
Car        Session      carId       delete
Car        TrackNote    carId       delete
Car        Maintenance  carId       delete
Track      TrackNote    trackId     delete
Track      Setup        trackId     nullify
Track      Session      trackId     nullify
Session    CornerNote   sessionId   delete
=========  ===========  ==========  =========

Every step filters by owner as well as by key.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Collection
from dataclasses import dataclass, field
from enum import StrEnum

from racelog.entities import OWNED_KINDS, SCHEMAS, EntityKind
from racelog.record_store import RecordStore
from racelog.repository import Repository

logger = logging.getLogger(__name__)


class CascadeAction(StrEnum):
    """What happens to a child when its parent is deleted."""

    DELETE = "delete"
    NULLIFY = "nullify"


@dataclass(frozen=True)
class CascadeRule:
    """A single parent -> child referential rule."""

    parent: EntityKind
    child: EntityKind
    foreign_key: str
    action: CascadeAction


CASCADE_RULES: tuple[CascadeRule, ...] = (
    CascadeRule(EntityKind.CAR, EntityKind.SETUP, "carId", CascadeAction.DELETE),
    CascadeRule(EntityKind.CAR, EntityKind.SESSION, "carId", CascadeAction.DELETE),
    CascadeRule(EntityKind.CAR, EntityKind.TRACK_NOTE, "carId", CascadeAction.DELETE),
    CascadeRule(EntityKind.CAR, EntityKind.MAINTENANCE, "carId", CascadeAction.DELETE),
    CascadeRule(EntityKind.TRACK, EntityKind.TRACK_NOTE, "trackId", CascadeAction.DELETE),
    CascadeRule(EntityKind.TRACK, EntityKind.SETUP, "trackId", CascadeAction.NULLIFY),
    CascadeRule(EntityKind.TRACK, EntityKind.SESSION, "trackId", CascadeAction.NULLIFY),
    CascadeRule(EntityKind.SESSION, EntityKind.CORNER_NOTE, "sessionId", CascadeAction.DELETE),
)


def rules_for(parent: EntityKind) -> list[CascadeRule]:
    """Return the rules triggered by deleting a *parent* record."""
    return [r for r in CASCADE_RULES if r.parent == parent]


# ---------------------------------------------------------------------------
# Result accounting
# ---------------------------------------------------------------------------


@dataclass
class CascadeResult:
    """Counts of records deleted and unlinked by one or more cascades."""

    deleted: Counter[EntityKind] = field(default_factory=Counter)
    unlinked: Counter[EntityKind] = field(default_factory=Counter)
    missing: int = 0

    def merge(self, other: CascadeResult) -> None:
        """Fold *other* into this result."""
        self.deleted.update(other.deleted)
        self.unlinked.update(other.unlinked)
        self.missing += other.missing

    def to_dict(self) -> dict[str, object]:
        """Summary keyed by envelope data keys (``cars``, ``cornerNotes``, ...)."""
        return {
            "deleted": {SCHEMAS[k].data_key: n for k, n in self.deleted.items() if n},
            "unlinked": {SCHEMAS[k].data_key: n for k, n in self.unlinked.items() if n},
            "missing": self.missing,
        }


# ---------------------------------------------------------------------------
# Cascades
# ---------------------------------------------------------------------------


def _cascade(
    store: RecordStore,
    parent: EntityKind,
    owner_id: str,
    parent_ids: Collection[str],
    result: CascadeResult,
) -> None:
    for rule in rules_for(parent):
        repo = Repository(store, rule.child)
        if rule.action == CascadeAction.DELETE:
            removed = repo.delete_where(owner_id, rule.foreign_key, parent_ids)
            result.deleted[rule.child] += len(removed)
            if removed and rules_for(rule.child):
                _cascade(store, rule.child, owner_id, {r["id"] for r in removed}, result)
        else:
            result.unlinked[rule.child] += repo.nullify_where(
                owner_id, rule.foreign_key, parent_ids
            )


def cascade_on_delete(
    store: RecordStore,
    kind: EntityKind,
    owner_id: str,
    record_ids: str | Collection[str],
) -> CascadeResult:
    """Apply the child-side effects of deleting already-removed parent records."""
    ids = {record_ids} if isinstance(record_ids, str) else set(record_ids)
    result = CascadeResult()
    if ids:
        _cascade(store, kind, owner_id, ids, result)
    return result


def delete_with_cascade(
    store: RecordStore, kind: EntityKind, owner_id: str, record_id: str
) -> CascadeResult:
    """Delete one owned record, then cascade to its children.

    Raises :class:`~racelog.errors.NotFoundError` (and touches nothing) if
    the record does not resolve for *owner_id*.
    """
    Repository(store, kind).delete(owner_id, record_id)
    result = cascade_on_delete(store, kind, owner_id, record_id)
    result.deleted[kind] += 1
    logger.info(
        "Deleted %s %s for user %s (cascade: %s)",
        kind,
        record_id,
        owner_id,
        result.to_dict(),
    )
    return result


def delete_many_with_cascade(
    store: RecordStore, kind: EntityKind, owner_id: str, record_ids: Collection[str]
) -> CascadeResult:
    """Delete several owned records of one kind and cascade to their children.

    Ids that do not resolve for *owner_id* are counted in ``missing``.
    """
    wanted = set(record_ids)
    removed = Repository(store, kind).delete_where(owner_id, "id", wanted)
    found = {r["id"] for r in removed}
    result = cascade_on_delete(store, kind, owner_id, found)
    result.deleted[kind] += len(found)
    result.missing += len(wanted - found)
    return result


def purge_account_data(store: RecordStore, owner_id: str) -> CascadeResult:
    """Delete every record owned by *owner_id* across all collections."""
    result = CascadeResult()
    for kind in OWNED_KINDS:
        result.deleted[kind] += Repository(store, kind).purge_owner(owner_id)
    logger.info("Purged account data for user %s: %s", owner_id, result.to_dict())
    return result
