"""Tests for registration, login and account management endpoints."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from backend.api.main import app
from backend.api.routers.auth import login, register
from backend.api.routers.user import remove_account, update_password
from backend.tests.conftest import PASSWORD, login_as


class TestRegisterAndLogin:
    @pytest.mark.asyncio
    async def test_register_then_login(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register", json={"username": "driver", "password": PASSWORD}
        )
        assert response.status_code == 201
        assert response.json()["message"] == "User registered successfully"

        # Registering does not log in
        assert (await client.get("/api/auth/check")).json()["authenticated"] is False

        response = await client.post(
            "/api/auth/login", json={"username": "DRIVER", "password": PASSWORD}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Login successful", "username": "driver"}

        check = (await client.get("/api/auth/check")).json()
        assert check == {"authenticated": True, "username": "driver"}

    @pytest.mark.asyncio
    async def test_register_validation(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register", json={"username": "ab", "password": PASSWORD}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Username must be at least 3 characters"

        response = await client.post("/api/auth/register", json={"username": "abc"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Username and password are required"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, client: AsyncClient) -> None:
        await login_as(client, "driver")
        response = await client.post(
            "/api/auth/register", json={"username": "Driver", "password": PASSWORD}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Username already exists"

    @pytest.mark.asyncio
    async def test_bad_login(self, client: AsyncClient) -> None:
        await login_as(client, "driver")
        await client.post("/api/auth/logout")
        response = await client.post(
            "/api/auth/login", json={"username": "driver", "password": "wrong-one"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_logout_ends_session(self, auth_client: AsyncClient) -> None:
        response = await auth_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert (await auth_client.get("/api/cars")).status_code == 401


class TestUserAccount:
    @pytest.mark.asyncio
    async def test_change_username(self, auth_client: AsyncClient) -> None:
        response = await auth_client.put("/api/user/username", json={"username": "pilot"})
        assert response.status_code == 200
        assert response.json()["username"] == "pilot"
        assert (await auth_client.get("/api/auth/check")).json()["username"] == "pilot"

    @pytest.mark.asyncio
    async def test_change_password(self, auth_client: AsyncClient) -> None:
        response = await auth_client.put(
            "/api/user/password",
            json={"currentPassword": PASSWORD, "newPassword": "brand-new"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"

        await auth_client.post("/api/auth/logout")
        response = await auth_client.post(
            "/api/auth/login", json={"username": "driver", "password": "brand-new"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, auth_client: AsyncClient) -> None:
        response = await auth_client.put(
            "/api/user/password",
            json={"currentPassword": "not-it", "newPassword": "brand-new"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Current password is incorrect"


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_password_required(self, auth_client: AsyncClient) -> None:
        response = await auth_client.request("DELETE", "/api/user", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Password is required to delete account"

    @pytest.mark.asyncio
    async def test_wrong_password_keeps_data(self, auth_client: AsyncClient) -> None:
        await auth_client.post("/api/cars", json={"name": "Kept"})
        response = await auth_client.request("DELETE", "/api/user", json={"password": "nope-nope"})
        assert response.status_code == 401
        assert len((await auth_client.get("/api/cars")).json()) == 1

    @pytest.mark.asyncio
    async def test_deletes_everything(
        self, auth_client: AsyncClient, rival_client: AsyncClient
    ) -> None:
        car = (await auth_client.post("/api/cars", json={"name": "Elise"})).json()
        track = (await auth_client.post("/api/tracks", json={"name": "Oulton"})).json()
        session = (
            await auth_client.post(
                "/api/sessions", json={"carId": car["id"], "trackId": track["id"]}
            )
        ).json()
        await auth_client.post(
            "/api/corner-notes",
            json={"sessionId": session["id"], "cornerName": "Old Hall", "field": "apex"},
        )
        await auth_client.post("/api/maintenance", json={"carId": car["id"]})
        await rival_client.post("/api/cars", json={"name": "Rival car"})

        response = await auth_client.request("DELETE", "/api/user", json={"password": PASSWORD})
        assert response.status_code == 200
        assert response.json()["message"] == "Account deleted successfully"

        # Session is gone and the credentials no longer work
        assert (await auth_client.get("/api/cars")).status_code == 401
        response = await auth_client.post(
            "/api/auth/login", json={"username": "driver", "password": PASSWORD}
        )
        assert response.status_code == 401

        assert len((await rival_client.get("/api/cars")).json()) == 1

    @pytest.mark.asyncio
    async def test_other_sessions_of_deleted_account_are_rejected(
        self, auth_client: AsyncClient
    ) -> None:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as second:
            response = await second.post(
                "/api/auth/login", json={"username": "driver", "password": PASSWORD}
            )
            assert response.status_code == 200

            response = await auth_client.request(
                "DELETE", "/api/user", json={"password": PASSWORD}
            )
            assert response.status_code == 200

            assert (await second.post("/api/cars", json={"name": "Ghost"})).status_code == 401
            assert (await second.get("/api/auth/check")).json()["authenticated"] is False

        response = await auth_client.get("/api/cars")
        assert response.status_code == 401


class TestPasswordHashingHandlers:
    @pytest.mark.parametrize("endpoint", [register, login, update_password, remove_account])
    def test_run_in_threadpool(self, endpoint: Callable[..., Any]) -> None:
        assert not inspect.iscoroutinefunction(endpoint)
