"""Tests for the corner-note upsert endpoint."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestCornerNoteUpsert:
    @pytest.mark.asyncio
    async def test_created_then_updated(self, auth_client: AsyncClient) -> None:
        body = {"sessionId": "s1", "cornerName": "Hawthorn", "field": "entry", "value": "lift"}
        first = await auth_client.post("/api/corner-notes", json=body)
        assert first.status_code == 201

        second = await auth_client.post(
            "/api/corner-notes",
            json={"sessionId": "s1", "cornerName": "Hawthorn", "field": "apex", "value": "tight"},
        )
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["entry"] == "lift"
        assert second.json()["apex"] == "tight"

        notes = (await auth_client.get("/api/corner-notes", params={"sessionId": "s1"})).json()
        assert len(notes) == 1

    @pytest.mark.asyncio
    async def test_requires_session_and_corner(self, auth_client: AsyncClient) -> None:
        response = await auth_client.post("/api/corner-notes", json={"cornerName": "Hawthorn"})
        assert response.status_code == 400
        assert response.json()["detail"] == "sessionId and cornerName are required"

    @pytest.mark.asyncio
    async def test_invalid_field(self, auth_client: AsyncClient) -> None:
        response = await auth_client.post(
            "/api/corner-notes",
            json={"sessionId": "s1", "cornerName": "Hawthorn", "field": "braking"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_and_delete(self, auth_client: AsyncClient) -> None:
        note = (
            await auth_client.post(
                "/api/corner-notes", json={"sessionId": "s1", "cornerName": "Druids"}
            )
        ).json()
        assert (await auth_client.get(f"/api/corner-notes/{note['id']}")).status_code == 200
        assert (await auth_client.delete(f"/api/corner-notes/{note['id']}")).status_code == 204
        assert (await auth_client.get(f"/api/corner-notes/{note['id']}")).status_code == 404
