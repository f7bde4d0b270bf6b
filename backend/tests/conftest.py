"""Test fixtures for the backend test suite."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from backend.api.config import Settings
from backend.api.dependencies import get_settings
from backend.api.main import app

PASSWORD = "hunter22"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every directory at a fresh temporary tree."""
    return Settings(
        data_dir=str(tmp_path / "data"),
        track_images_dir=str(tmp_path / "public" / "images" / "tracks"),
        public_dir=str(tmp_path / "public"),
    )


@pytest.fixture(autouse=True)
def _override_settings(settings: Settings) -> Generator[None, None, None]:
    app.dependency_overrides[get_settings] = lambda: settings
    yield
    app.dependency_overrides.pop(get_settings, None)


async def login_as(client: AsyncClient, username: str, password: str = PASSWORD) -> None:
    """Register *username* and log the client in."""
    response = await client.post(
        "/api/auth/register", json={"username": username, "password": password}
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Anonymous async test client (no session cookie)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Client logged in as ``driver``."""
    await login_as(client, "driver")
    return client


@pytest_asyncio.fixture
async def rival_client() -> AsyncGenerator[AsyncClient, None]:
    """A second, independent client logged in as ``rival``."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        await login_as(ac, "rival")
        yield ac
