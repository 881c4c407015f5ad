from __future__ import annotations

import socket

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from cirrus.errors import APIError, TransportError
from cirrus.infra.http import BearerAuth, HttpClient

pytestmark = [pytest.mark.unit]


def make_app(*, token: str = "valid-token") -> web.Application:
    app = web.Application()

    async def echo(request: web.Request) -> web.Response:
        if request.headers.get("Authorization") != f"Bearer {token}":
            return web.json_response({"message": "Unauthenticated."}, status=401)
        body = await request.json() if request.can_read_body else None
        return web.json_response({
            "body": body,
            "params": dict(request.query),
            "headers": {
                "accept": request.headers.get("Accept"),
                "content_type": request.headers.get("Content-Type"),
                "user_agent": request.headers.get("User-Agent"),
            },
        })

    async def empty(_: web.Request) -> web.Response:
        return web.Response(status=204)

    async def not_found(_: web.Request) -> web.Response:
        return web.json_response({"message": "VPS not found"}, status=404)

    async def invalid(_: web.Request) -> web.Response:
        return web.json_response(
            {"message": "The given data was invalid.", "errors": {"name": ["Name is required"]}},
            status=422,
        )

    async def gateway(_: web.Request) -> web.Response:
        return web.Response(status=502, text="upstream unavailable")

    async def blank_error(_: web.Request) -> web.Response:
        return web.Response(status=500)

    async def maintenance(_: web.Request) -> web.Response:
        return web.Response(status=200, text="<html>maintenance</html>", content_type="text/html")

    app.router.add_route("*", "/echo", echo)
    app.router.add_delete("/empty", empty)
    app.router.add_get("/missing", not_found)
    app.router.add_post("/invalid", invalid)
    app.router.add_get("/gateway", gateway)
    app.router.add_get("/blank", blank_error)
    app.router.add_get("/maintenance", maintenance)
    return app


@pytest.fixture
async def server():
    srv = TestServer(make_app())
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.fixture
def base_url(server: TestServer) -> str:
    return f"http://{server.host}:{server.port}"


def _unused_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


# ─── BearerAuth ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_bearer_auth_headers():
    h = await BearerAuth("my-token").headers()
    assert h == {"Authorization": "Bearer my-token", "Accept": "application/json"}


# ─── Requests ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_sends_auth_and_user_agent(base_url: str):
    async with HttpClient(
        base_url, BearerAuth("valid-token"), user_agent="cirrus-test/1.0"
    ) as http:
        result = await http.request("GET", "/echo", params={"page": 2})
    assert result["params"] == {"page": "2"}
    assert result["headers"]["accept"] == "application/json"
    assert result["headers"]["user_agent"] == "cirrus-test/1.0"


@pytest.mark.asyncio
async def test_content_type_only_with_body(base_url: str):
    async with HttpClient(base_url, BearerAuth("valid-token")) as http:
        without = await http.request("GET", "/echo")
        with_body = await http.request("POST", "/echo", json={"name": "web-1"})
    assert without["headers"]["content_type"] is None
    assert with_body["headers"]["content_type"] == "application/json"
    assert with_body["body"] == {"name": "web-1"}


@pytest.mark.asyncio
async def test_empty_body_returns_none(base_url: str):
    async with HttpClient(base_url) as http:
        assert await http.request("DELETE", "/empty") is None


@pytest.mark.asyncio
async def test_base_url_trailing_slash(base_url: str):
    async with HttpClient(base_url + "/", BearerAuth("valid-token")) as http:
        result = await http.request("GET", "/echo")
    assert result["params"] == {}


# ─── Errors ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_bad_token_is_api_error(base_url: str):
    async with HttpClient(base_url, BearerAuth("wrong")) as http:
        with pytest.raises(APIError) as exc_info:
            await http.request("GET", "/echo")
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Unauthenticated."


@pytest.mark.asyncio
async def test_not_found(base_url: str):
    async with HttpClient(base_url) as http:
        with pytest.raises(APIError) as exc_info:
            await http.request("GET", "/missing")
    assert exc_info.value.is_not_found


@pytest.mark.asyncio
async def test_validation_error(base_url: str):
    async with HttpClient(base_url) as http:
        with pytest.raises(APIError) as exc_info:
            await http.request("POST", "/invalid", json={})
    assert str(exc_info.value) == "API error 422: name: Name is required"


@pytest.mark.asyncio
async def test_non_json_error_body(base_url: str):
    async with HttpClient(base_url) as http:
        with pytest.raises(APIError) as exc_info:
            await http.request("GET", "/gateway")
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "upstream unavailable"


@pytest.mark.asyncio
async def test_empty_error_body(base_url: str):
    async with HttpClient(base_url) as http:
        with pytest.raises(APIError) as exc_info:
            await http.request("GET", "/blank")
    assert str(exc_info.value) == "API error 500: Unknown error"


@pytest.mark.asyncio
async def test_connection_refused_is_transport_error():
    async with HttpClient(f"http://127.0.0.1:{_unused_port()}") as http:
        with pytest.raises(TransportError) as exc_info:
            await http.request("GET", "/vps")
    assert exc_info.value.method == "GET"
    assert exc_info.value.path == "/vps"


@pytest.mark.asyncio
async def test_success_with_html_body_is_transport_error(base_url: str):
    async with HttpClient(base_url) as http:
        with pytest.raises(TransportError) as exc_info:
            await http.request("GET", "/maintenance")
    assert exc_info.value.reason == "invalid JSON in response"
    assert str(exc_info.value) == "GET /maintenance failed: invalid JSON in response"
    assert isinstance(exc_info.value.__cause__, ValueError)
