"""Download external track images into local storage.

Track layouts are usually pasted in as links to third-party sites that may
disappear or block hotlinking, so the image is fetched once and served from
``/images/tracks/`` afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import httpx
from racelog.transfer import LOCAL_IMAGE_PREFIX

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT_S = 30.0
USER_AGENT = "RaceLog/1.0"
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"})
DEFAULT_EXTENSION = ".png"


def is_external(image_url: str | None) -> bool:
    """True for http(s) URLs that are not already stored locally."""
    if not image_url:
        return False
    return urlparse(image_url).scheme in ("http", "https")


def image_extension(image_url: str) -> str:
    """File extension for a downloaded image, ``.png`` when unrecognised."""
    suffix = Path(urlparse(image_url).path).suffix.lower()
    return suffix if suffix in IMAGE_EXTENSIONS else DEFAULT_EXTENSION


async def download_track_image(image_url: str, track_id: str, images_dir: Path) -> str:
    """Fetch *image_url* and store it as ``<track_id><ext>``.

    Returns the local URL.  Raises ``httpx.HTTPError`` or ``OSError`` on
    failure.
    """
    filename = f"{track_id}{image_extension(image_url)}"
    async with httpx.AsyncClient(
        timeout=DOWNLOAD_TIMEOUT_S,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    ) as client:
        response = await client.get(image_url)
        response.raise_for_status()

    images_dir.mkdir(parents=True, exist_ok=True)
    (images_dir / filename).write_bytes(response.content)
    logger.info("Stored track image %s (%d bytes)", filename, len(response.content))
    return f"{LOCAL_IMAGE_PREFIX}{filename}"


async def localize_track_image(image_url: str | None, track_id: str, images_dir: Path) -> str:
    """Return a local URL for an external image, or *image_url* unchanged.

    Download failures are logged and the original URL is kept so the track
    still saves.
    """
    if not image_url or not is_external(image_url):
        return image_url or ""
    try:
        return await download_track_image(image_url, track_id, images_dir)
    except (httpx.HTTPError, OSError):
        logger.warning("Failed to download track image %s", image_url, exc_info=True)
        return image_url
