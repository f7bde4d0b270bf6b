"""FastAPI application entry point."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from racelog.errors import AuthenticationError, CorruptStoreError, NotFoundError, ValidationError
from starlette.middleware.sessions import SessionMiddleware

from backend.api.config import Settings
from backend.api.routers import (
    auth,
    cars,
    corner_notes,
    data,
    maintenance,
    sessions,
    setups,
    track_notes,
    tracks,
    user,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.track_images_dir).mkdir(parents=True, exist_ok=True)
    logger.info("RaceLog data directory: %s", Path(settings.data_dir).resolve())

    yield


load_dotenv()  # Populate os.environ from .env before reading settings
settings = Settings()

app = FastAPI(
    title="RaceLog API",
    description="Car setups, track sessions and maintenance for track-day drivers",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)


# -- Exception handlers --------------------------------------------------------


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Logs the full traceback server-side but returns a safe generic message
    to the client (no internal details leaked).
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Return 404 for records that are missing or owned by someone else."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Return 400 for rejected input."""
    logger.warning("ValidationError on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """Return 401 for bad credentials."""
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(CorruptStoreError)
async def corrupt_store_handler(request: Request, exc: CorruptStoreError) -> JSONResponse:
    """Return 500 when a collection file cannot be parsed.

    The file is left untouched on disk so it can be repaired by hand.
    """
    logger.error("Corrupt collection on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Data store is unreadable"})


# -- Middleware (order matters: last added = first executed) ------------------

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age_s,
    same_site="lax",
    https_only=settings.session_https_only,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- Routers -----------------------------------------------------------------

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(user.router, prefix="/api/user", tags=["user"])
app.include_router(cars.router, prefix="/api/cars", tags=["cars"])
app.include_router(tracks.router, prefix="/api/tracks", tags=["tracks"])
app.include_router(setups.router, prefix="/api/setups", tags=["setups"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
app.include_router(corner_notes.router, prefix="/api/corner-notes", tags=["corner-notes"])
app.include_router(track_notes.router, prefix="/api/track-notes", tags=["track-notes"])
app.include_router(maintenance.router, prefix="/api/maintenance", tags=["maintenance"])
app.include_router(data.router, prefix="/api/data", tags=["data"])


# -- Health ------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Return a simple health-check response."""
    return {"status": "ok"}


# -- Static frontend ---------------------------------------------------------

# Mounted last so API routes take precedence over files in public/
if Path(settings.public_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")
