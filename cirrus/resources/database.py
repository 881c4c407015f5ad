"""Managed databases (MySQL, PostgreSQL, MariaDB)."""

from __future__ import annotations

from cirrus.config import KindTimeouts
from cirrus.resources.base import PowerControlledService
from cirrus.resources.providers import DATABASE_PROVIDERS, EngineProvider
from cirrus.resources.types import (
    CreateDatabaseParams,
    DatabaseCredentials,
    DatabaseInstance,
    UpdateDatabaseParams,
)
from cirrus.types import ResourceKind


class DatabaseService(PowerControlledService[DatabaseInstance]):
    kind = ResourceKind.DATABASE
    path = "/database"
    envelope = "instance"
    default_timeouts = KindTimeouts(create=30 * 60, update=30 * 60, delete=15 * 60)
    # The backend applies profile changes through a deployment job that
    # runs after the PUT returns and flips the status to pending and back.
    # Waiting for running here would time out, so update returns at once.
    waits_after_update = False

    async def create(  # type: ignore[override]
        self, params: CreateDatabaseParams, *, timeout: float | None = None
    ) -> DatabaseInstance:
        return await super().create(params, timeout=timeout)

    async def update(  # type: ignore[override]
        self, resource_id: str, params: UpdateDatabaseParams, *, timeout: float | None = None
    ) -> DatabaseInstance:
        return await super().update(resource_id, params, timeout=timeout)

    async def credentials(self, resource_id: str) -> DatabaseCredentials:
        return await self._api.get(self._item_path(resource_id, "credentials"))

    @staticmethod
    def providers() -> tuple[EngineProvider, ...]:
        """Engines available for new databases."""
        return DATABASE_PROVIDERS
