try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest
from fastapi import FastAPI

from app.core.config import CORSSettings
from app.core.cors import build_cors_headers, install_cors
from app.main import app

EXPECTED_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-credentials": "true",
    "access-control-allow-methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "access-control-allow-headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}


def _client(asgi_app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=asgi_app),
        base_url="http://testserver",
    )


@pytest.mark.anyio
@pytest.mark.parametrize(
    "path", ["/api/analyze-screenshot", "/api/health", "/api/does-not-exist"]
)
async def test_preflight_is_answered_on_any_path(path):
    async with _client(app) as client:
        response = await client.options(
            path,
            headers={
                "Origin": "https://flow.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )

    assert response.status_code == 200
    assert response.content == b""
    for name, value in EXPECTED_HEADERS.items():
        assert response.headers[name] == value


@pytest.mark.anyio
async def test_regular_responses_carry_cors_headers():
    async with _client(app) as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    for name, value in EXPECTED_HEADERS.items():
        assert response.headers[name] == value


@pytest.mark.anyio
async def test_install_cors_honours_custom_settings():
    custom = FastAPI()
    install_cors(
        custom,
        CORSSettings(
            allow_origin="https://app.example.com",
            allow_credentials=False,
            allow_methods=("GET", "POST"),
            allow_headers=("Content-Type",),
        ),
    )

    @custom.get("/ping")
    async def ping() -> dict:
        return {"pong": True}

    async with _client(custom) as client:
        response = await client.get("/ping")

    assert response.headers["access-control-allow-origin"] == "https://app.example.com"
    assert response.headers["access-control-allow-credentials"] == "false"
    assert response.headers["access-control-allow-methods"] == "GET,POST"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


def test_build_cors_headers_defaults():
    headers = build_cors_headers(CORSSettings())

    assert {name.lower(): value for name, value in headers.items()} == EXPECTED_HEADERS
