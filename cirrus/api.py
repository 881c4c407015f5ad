"""Control-plane request layer shared by all resource services."""

from __future__ import annotations

from typing import Any

from cirrus.config import CirrusConfig
from cirrus.infra.http import BearerAuth, HttpClient
from cirrus.infra.retry import retry, transient


class ControlPlaneAPI:
    """Thin wrapper over ``HttpClient`` that knows which calls may repeat.

    ``get`` retries transient failures (network errors, 429, 502-504):
    repeated reads are always safe. ``send`` is used for creates, updates,
    deletes and actions and is attempted exactly once.
    """

    def __init__(self, config: CirrusConfig, http: HttpClient | None = None) -> None:
        self.config = config
        self._http = http or HttpClient(
            config.base_url,
            BearerAuth(config.api_token),
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )
        self._get = retry(
            on=transient,
            max_attempts=max(config.read_retries, 1),
            base_delay=config.retry_base_delay,
        )(self._http.request)

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self._get("GET", path, params=params)

    async def send(self, method: str, path: str, *, json: Any = None) -> Any:
        return await self._http.request(method, path, json=json)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> ControlPlaneAPI:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
