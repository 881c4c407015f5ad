"""Managed in-memory caches (Redis, Valkey, Dragonfly)."""

from __future__ import annotations

from cirrus.config import KindTimeouts
from cirrus.resources.base import PowerControlledService
from cirrus.resources.providers import CACHE_PROVIDERS, EngineProvider
from cirrus.resources.types import (
    CacheConnectionInfo,
    CacheInstance,
    CreateCacheParams,
    UpdateCacheParams,
)
from cirrus.types import ResourceKind


class CacheService(PowerControlledService[CacheInstance]):
    kind = ResourceKind.CACHE
    path = "/cache"
    envelope = "instance"
    default_timeouts = KindTimeouts(create=30 * 60, update=30 * 60, delete=15 * 60)
    # Same as databases: resizing is applied by an out-of-band deployment
    # job, so update must not wait for running.
    waits_after_update = False

    async def create(  # type: ignore[override]
        self, params: CreateCacheParams, *, timeout: float | None = None
    ) -> CacheInstance:
        return await super().create(params, timeout=timeout)

    async def update(  # type: ignore[override]
        self, resource_id: str, params: UpdateCacheParams, *, timeout: float | None = None
    ) -> CacheInstance:
        return await super().update(resource_id, params, timeout=timeout)

    async def connection_info(self, resource_id: str) -> CacheConnectionInfo:
        return await self._api.get(self._item_path(resource_id, "connection-info"))

    @staticmethod
    def providers() -> tuple[EngineProvider, ...]:
        """Engines available for new caches."""
        return CACHE_PROVIDERS
