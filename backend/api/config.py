"""Application settings via pydantic-settings."""

from __future__ import annotations

import json

from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_cors_origins(raw: str) -> list[str]:
    """Parse a CORS origins string, tolerating non-JSON formats.

    Accepts:
    - JSON arrays: ``["http://a.local","http://b.local"]``
    - Bracketed non-JSON: ``[http://a.local,http://b.local]``
    - Comma-separated: ``http://a.local,http://b.local``
    """
    try:
        parsed = json.loads(raw)
        if isinstance(parsed, list):
            return [str(x) for x in parsed]
    except (json.JSONDecodeError, ValueError):
        pass

    stripped = raw.strip("[] ")
    return [s.strip().strip('"').strip("'") for s in stripped.split(",") if s.strip()]


class Settings(BaseSettings):
    """RaceLog API configuration.

    Values are loaded from environment variables (``RACELOG_`` prefix),
    falling back to a ``.env`` file in the project root.
    """

    model_config = SettingsConfigDict(
        env_prefix="RACELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # File storage
    data_dir: str = "data"
    seed_dir: str = ""  # bundled default collections, copied on first access
    public_dir: str = "public"
    track_images_dir: str = "public/images/tracks"

    # Session cookie
    session_secret: str = "racelog-secret-key-change-in-production"
    session_cookie: str = "racelog_session"
    session_max_age_s: int = 86400 * 7
    session_https_only: bool = False

    # CORS, kept as a raw string so malformed env values don't fail parsing
    cors_origins_raw: str = '["http://localhost:3000"]'

    debug: bool = False

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from the raw string."""
        return _parse_cors_origins(self.cors_origins_raw)
