"""Export, import and bulk-delete endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from racelog.bulk_delete import bulk_delete
from racelog.transfer import ExportFlags, export_selection, import_envelope

from backend.api.dependencies import CurrentUser, ImagesDir, Store
from backend.api.schemas.data import BulkDeleteRequest, ExportRequest, ImportRequest

router = APIRouter()


@router.post("/export")
async def export_data(
    body: ExportRequest,
    current_user: CurrentUser,
    store: Store,
    images_dir: ImagesDir,
) -> dict[str, Any]:
    """Return an export envelope for the selected cars and tracks."""
    flags = ExportFlags(
        setups=body.include_setups,
        sessions=body.include_sessions,
        maintenance=body.include_maintenance,
        track_notes=body.include_track_notes,
    )
    return export_selection(
        store,
        current_user.user_id,
        body.car_ids,
        body.track_ids,
        flags=flags,
        images_dir=images_dir,
    )


@router.post("/import")
async def import_data(
    body: ImportRequest,
    current_user: CurrentUser,
    store: Store,
    images_dir: ImagesDir,
) -> dict[str, object]:
    """Import an envelope into the current account.

    Returns per-category imported/skipped counts.
    """
    summary = import_envelope(
        store,
        current_user.user_id,
        body.envelope,
        mode=body.mode,
        images_dir=images_dir,
    )
    return summary.to_dict()


@router.post("/bulk-delete")
async def bulk_delete_data(
    body: BulkDeleteRequest, current_user: CurrentUser, store: Store
) -> dict[str, object]:
    """Delete the selected cars and tracks with their full cascades."""
    result = bulk_delete(store, current_user.user_id, body.car_ids, body.track_ids)
    return result.to_dict()
