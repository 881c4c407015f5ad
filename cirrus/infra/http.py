from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

import aiohttp
from loguru import logger

from cirrus.errors import TransportError, parse_api_error

# ─── Auth ────────────────────────────────────────────────────────────


@runtime_checkable
class Auth(Protocol):
    async def headers(self) -> dict[str, str]: ...


class BearerAuth:
    def __init__(self, token: str) -> None:
        self._token = token

    async def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }


# ─── Client ──────────────────────────────────────────────────────────


class HttpClient:
    """One authenticated JSON exchange per call.

    Non-2xx responses raise ``APIError``; failures without a response, and
    2xx bodies that are not JSON, raise ``TransportError``. Cancelling the calling task aborts the in-flight
    request and propagates ``asyncio.CancelledError`` unchanged. Nothing is
    retried here: callers decide what is safe to repeat.
    """

    def __init__(
        self,
        base_url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30,
        user_agent: str | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._default_headers = {"User-Agent": user_agent} if user_agent else {}
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _build_headers(self, *, has_body: bool) -> dict[str, str]:
        headers = dict(self._default_headers)
        if self._auth:
            headers.update(await self._auth.headers())
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        session = await self._ensure_session()
        headers = await self._build_headers(has_body=json is not None)
        self._log.debug("{method} {path}", method=method, path=path)

        try:
            async with session.request(
                method, self._url(path), headers=headers, json=json, params=params
            ) as resp:
                return await self._parse(method, path, resp)
        except aiohttp.ClientError as e:
            self._log.warning(
                "{method} {path} failed without response: {error}",
                method=method, path=path, error=e,
            )
            raise TransportError(method, path, str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            self._log.warning("{method} {path} timed out", method=method, path=path)
            raise TransportError(method, path, "request timed out") from e

    async def _parse(
        self, method: str, path: str, resp: aiohttp.ClientResponse
    ) -> Any:
        body = await resp.text()
        if not 200 <= resp.status < 300:
            self._log.warning(
                "HTTP {status} from {method} {path}: {body}",
                status=resp.status, method=method, path=path, body=body[:500],
            )
            raise parse_api_error(resp.status, body)
        if not body.strip():
            return None
        try:
            return await resp.json(content_type=None)
        except ValueError as e:
            self._log.warning(
                "{method} {path} returned HTTP {status} with a non-JSON body: {body}",
                method=method, path=path, status=resp.status, body=body[:500],
            )
            raise TransportError(method, path, "invalid JSON in response") from e

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
