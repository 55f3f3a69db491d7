"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    ProfileNotFoundError,
    StoreUnavailableError,
    UpstreamAuthError,
    ValidationError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_not_found_returns_404_with_key(self) -> None:
        app = _create_test_app()

        @app.get("/raise-not-found")
        async def _() -> None:
            raise ProfileNotFoundError("ghost", lookup="username")

        response = await _get(app, "/raise-not-found")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "PROFILE_NOT_FOUND"
        assert "ghost" in body["message"]
        assert body["details"] == {"username": "ghost"}

    @pytest.mark.asyncio
    async def test_validation_error_returns_400(self) -> None:
        app = _create_test_app()

        @app.get("/raise-validation")
        async def _() -> None:
            raise ValidationError("Profile id is required", field="id")

        response = await _get(app, "/raise-validation")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert response.json()["details"] == {"field": "id"}

    @pytest.mark.asyncio
    async def test_store_unavailable_returns_500(self) -> None:
        app = _create_test_app()

        @app.get("/raise-store")
        async def _() -> None:
            raise StoreUnavailableError()

        response = await _get(app, "/raise-store")

        assert response.status_code == 500
        assert response.json()["error_code"] == "STORE_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_upstream_auth_error_keeps_provider_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-auth")
        async def _() -> None:
            raise UpstreamAuthError("Email already registered")

        response = await _get(app, "/raise-auth")

        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_request_validation_error_returns_field_details(self) -> None:
        app = _create_test_app()

        @app.put("/validate")
        async def _(body: dict[str, int]) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.put("/validate", json=["not", "an", "object"])

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"], list)
        assert len(body["details"]) >= 1

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
