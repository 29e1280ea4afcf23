"""Tests for the error taxonomy and its HTTP mapping."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

from src.notevault.config import Settings, get_settings
from src.notevault.core.error_handlers import register_error_handlers
from src.notevault.core.errors import (
    STATUS_BY_KIND,
    AppError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    DatabaseError,
    ErrorKind,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    TokenExpiredError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error_cls, status",
    [
        (ValidationError, 400),
        (BadRequestError, 400),
        (AuthenticationError, 401),
        (TokenExpiredError, 401),
        (ForbiddenError, 403),
        (NotFoundError, 404),
        (ConflictError, 409),
        (RateLimitError, 429),
        (DatabaseError, 500),
    ],
)
def test_status_follows_kind(error_cls, status):
    assert error_cls().status_code == status


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


def test_defaults_and_overrides():
    err = NotFoundError()
    assert err.code == "NOT_FOUND"
    assert err.message == "Resource not found"
    assert str(err) == "Resource not found"

    err = AuthenticationError("nope", code="REFRESH_TOKEN_INVALID", status_code=403)
    assert err.kind is ErrorKind.AUTHENTICATION
    assert err.code == "REFRESH_TOKEN_INVALID"
    assert err.status_code == 403


class Payload(BaseModel):
    name: str


def _build_app(debug: bool) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    app.dependency_overrides[get_settings] = lambda: Settings(debug=debug)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError("Note not found", code="NOTE_NOT_FOUND")

    @app.get("/unauthorized")
    async def unauthorized():
        raise AuthenticationError()

    @app.get("/db")
    async def db():
        raise DatabaseError() from OperationalError("SELECT 1", {}, Exception("conn refused"))

    @app.get("/raw-db")
    async def raw_db():
        raise OperationalError("SELECT 1", {}, Exception("conn refused"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.post("/validate")
    async def validate(payload: Payload):
        return payload

    return app


async def _client(app: FastAPI) -> AsyncClient:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
async def test_app_error_body():
    async with await _client(_build_app(debug=False)) as client:
        response = await client.get("/not-found")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "NOTE_NOT_FOUND"
    assert body["kind"] == "not_found"
    assert body["message"] == "Note not found"
    assert body["details"] is None
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_authentication_error_sets_www_authenticate():
    async with await _client(_build_app(debug=False)) as client:
        response = await client.get("/unauthorized")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_request_validation_is_a_400_with_field_details():
    async with await _client(_build_app(debug=False)) as client:
        response = await client.post("/validate", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"]["fields"][0]["field"] == "name"


@pytest.mark.asyncio
async def test_unknown_route_uses_the_same_body():
    async with await _client(_build_app(debug=False)) as client:
        response = await client.get("/missing")
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/db", "/raw-db", "/boom"])
async def test_server_errors_hide_details_outside_debug(path):
    async with await _client(_build_app(debug=False)) as client:
        response = await client.get(path)

    assert response.status_code == 500
    body = response.json()
    assert body["details"] is None
    assert "secret internals" not in response.text
    assert "conn refused" not in response.text


@pytest.mark.asyncio
async def test_server_errors_show_exception_in_debug():
    async with await _client(_build_app(debug=True)) as client:
        response = await client.get("/db")

    body = response.json()
    assert body["error"] == "DATABASE_ERROR"
    assert body["details"]["exception_type"] == "OperationalError"
