"""Integration tests for Profiles API."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


async def _seed(factory: async_sessionmaker[AsyncSession], doc_id: str, doc: dict) -> None:
    async with SQLAlchemyUnitOfWork(factory) as uow:
        await uow.documents.put("profiles", doc_id, doc)
        await uow.commit()


class TestSaveProfile:
    """PUT /api/v1/profiles/{id}."""

    @pytest.mark.asyncio
    async def test_creates_profile(self, client: AsyncClient):
        response = await client.put(
            "/api/v1/profiles/uid-1",
            json={"username": "neon", "bio": "hi", "links": "https://a.test, https://b.test"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile saved successfully!"
        data = body["data"]
        assert data["id"] == "uid-1"
        assert data["username"] == "neon"
        assert data["displayName"] == "neon"
        assert data["links"] == ["https://a.test", "https://b.test"]
        assert data["pfpUrl"] is None
        assert data["styling"]["font"] == "default"
        assert data["styling"]["trailEffect"] is False
        assert data["updatedAt"] is not None

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, client: AsyncClient):
        await client.put("/api/v1/profiles/uid-1", json={"bio": "x", "links": ["a"]})

        response = await client.put("/api/v1/profiles/uid-1", json={"links": ["b", "c"]})

        data = response.json()["data"]
        assert data["bio"] == "x"
        assert data["links"] == ["b", "c"]

    @pytest.mark.asyncio
    async def test_reports_rejected_and_ignored_fields(self, client: AsyncClient):
        response = await client.put(
            "/api/v1/profiles/uid-1",
            json={"bio": "ok", "links": 7, "isAdmin": True},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["rejected_fields"] == ["links"]
        assert body["ignored_fields"] == ["isAdmin"]
        assert "isAdmin" not in body["data"]

    @pytest.mark.asyncio
    async def test_empty_body_touches_profile(self, client: AsyncClient):
        response = await client.put("/api/v1/profiles/uid-1")

        assert response.status_code == 200
        assert response.json()["data"]["bio"] == ""

    @pytest.mark.asyncio
    async def test_blank_id_returns_400(self, client: AsyncClient):
        response = await client.put("/api/v1/profiles/%20", json={"bio": "b"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_non_object_body_returns_400(self, client: AsyncClient):
        response = await client.put("/api/v1/profiles/uid-1", json=["bio", "x"])

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

        missing = await client.get("/api/v1/profiles/uid-1")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_updated_at_moves_forward(self, client: AsyncClient):
        first = await client.put("/api/v1/profiles/uid-1", json={"bio": "1"})
        second = await client.put("/api/v1/profiles/uid-1", json={"bio": "2"})

        first_at = datetime.fromisoformat(first.json()["data"]["updatedAt"])
        second_at = datetime.fromisoformat(second.json()["data"]["updatedAt"])
        assert second_at > first_at


class TestGetProfile:
    """GET /api/v1/profiles/{id}."""

    @pytest.mark.asyncio
    async def test_returns_saved_profile(self, client: AsyncClient):
        await client.put(
            "/api/v1/profiles/uid-1",
            json={"username": "neon", "styling": {"cursor": "crosshair"}},
        )

        response = await client.get("/api/v1/profiles/uid-1")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "neon"
        assert data["styling"]["cursor"] == "crosshair"

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient):
        response = await client.get("/api/v1/profiles/nonexistent")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PROFILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_legacy_record_is_normalized(self, client: AsyncClient, session_factory):
        await _seed(
            session_factory,
            "old-uid",
            {"username": "legacy", "links": "a, b", "font": "Comic Sans", "trailEffect": True},
        )

        response = await client.get("/api/v1/profiles/old-uid")

        data = response.json()["data"]
        assert data["links"] == ["a", "b"]
        assert data["styling"]["font"] == "Comic Sans"
        assert data["styling"]["trailEffect"] is True
        assert data["bio"] == ""


class TestGetProfileByUsername:
    """GET /api/v1/profiles/by-username."""

    @pytest.mark.asyncio
    async def test_finds_profile(self, client: AsyncClient):
        await client.put("/api/v1/profiles/uid-1", json={"username": "neon"})

        response = await client.get("/api/v1/profiles/by-username", params={"name": "neon"})

        assert response.status_code == 200
        assert response.json()["data"]["id"] == "uid-1"

    @pytest.mark.asyncio
    async def test_missing_name_returns_400(self, client: AsyncClient):
        response = await client.get("/api/v1/profiles/by-username")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_name_returns_404(self, client: AsyncClient):
        response = await client.get("/api/v1/profiles/by-username", params={"name": "ghost"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_padded_username_is_stored_trimmed(self, client: AsyncClient):
        saved = await client.put("/api/v1/profiles/uid-1", json={"username": " neon "})

        assert saved.json()["data"]["username"] == "neon"
        for name in ("neon", " neon "):
            response = await client.get("/api/v1/profiles/by-username", params={"name": name})
            assert response.status_code == 200
            assert response.json()["data"]["id"] == "uid-1"

    @pytest.mark.asyncio
    async def test_legacy_string_links_returned_as_list(
        self, client: AsyncClient, session_factory
    ):
        await _seed(session_factory, "old-uid", {"username": "legacy", "links": "x,y"})

        response = await client.get("/api/v1/profiles/by-username", params={"name": "legacy"})

        assert response.json()["data"]["links"] == ["x", "y"]

    @pytest.mark.asyncio
    async def test_duplicate_usernames_return_earliest(self, client: AsyncClient):
        await client.put("/api/v1/profiles/first", json={"username": "dup"})
        await client.put("/api/v1/profiles/second", json={"username": "dup"})

        response = await client.get("/api/v1/profiles/by-username", params={"name": "dup"})

        assert response.json()["data"]["id"] == "first"
