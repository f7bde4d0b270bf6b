"""Delete a multi-car, multi-track selection in one request."""

from __future__ import annotations

import logging
from collections.abc import Collection

from racelog.cascade import CascadeResult, delete_many_with_cascade
from racelog.entities import EntityKind
from racelog.record_store import RecordStore

logger = logging.getLogger(__name__)


def bulk_delete(
    store: RecordStore,
    owner_id: str,
    car_ids: Collection[str],
    track_ids: Collection[str],
) -> CascadeResult:
    """Delete the selected cars, then the selected tracks, with full cascades.

    Setups removed by the car pass are already gone when the track pass
    nullifies ``trackId`` references, so the two passes do not interfere.
    Ids that are not owned by *owner_id* are counted as ``missing``.
    """
    result = CascadeResult()
    if car_ids:
        result.merge(delete_many_with_cascade(store, EntityKind.CAR, owner_id, car_ids))
    if track_ids:
        result.merge(delete_many_with_cascade(store, EntityKind.TRACK, owner_id, track_ids))
    logger.info("Bulk delete for user %s: %s", owner_id, result.to_dict())
    return result
