"""Track CRUD endpoints, with external layout images stored locally."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Response
from racelog.cascade import delete_with_cascade
from racelog.entities import EntityKind
from racelog.repository import Repository

from backend.api.dependencies import CurrentUser, ImagesDir, Store
from backend.api.schemas.records import TrackFields
from backend.api.services.track_images import is_external, localize_track_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_tracks(current_user: CurrentUser, store: Store) -> list[dict[str, Any]]:
    """List the current user's tracks."""
    return Repository(store, EntityKind.TRACK).list(current_user.user_id)


@router.get("/{track_id}")
async def get_track(track_id: str, current_user: CurrentUser, store: Store) -> dict[str, Any]:
    return Repository(store, EntityKind.TRACK).get(current_user.user_id, track_id)


@router.post("", status_code=201)
async def create_track(
    body: TrackFields,
    current_user: CurrentUser,
    store: Store,
    images_dir: ImagesDir,
) -> dict[str, Any]:
    """Create a track.

    An external ``imageUrl`` is downloaded into local storage once the track
    has an id to name the file after; if the download fails the external URL
    is kept.
    """
    repo = Repository(store, EntityKind.TRACK)
    track = repo.create(current_user.user_id, body.to_record())

    if is_external(track["imageUrl"]):
        local_url = await localize_track_image(track["imageUrl"], track["id"], images_dir)
        if local_url != track["imageUrl"]:
            track = repo.update(current_user.user_id, track["id"], {"imageUrl": local_url})
    return track


@router.put("/{track_id}")
async def update_track(
    track_id: str,
    body: TrackFields,
    current_user: CurrentUser,
    store: Store,
    images_dir: ImagesDir,
) -> dict[str, Any]:
    """Partially update a track, downloading a newly supplied external image."""
    repo = Repository(store, EntityKind.TRACK)
    existing = repo.get(current_user.user_id, track_id)
    fields = body.to_record()

    new_url = fields.get("imageUrl")
    if is_external(new_url) and new_url != existing.get("imageUrl"):
        fields["imageUrl"] = await localize_track_image(new_url, track_id, images_dir)

    return repo.update(current_user.user_id, track_id, fields)


@router.delete("/{track_id}", status_code=204)
async def delete_track(track_id: str, current_user: CurrentUser, store: Store) -> Response:
    """Delete a track and its track notes; setups and sessions are unlinked."""
    delete_with_cascade(store, EntityKind.TRACK, current_user.user_id, track_id)
    return Response(status_code=204)
