"""Entry point: one client, one service per resource kind.

Example:

    async with Cirrus(api_token="...") as cloud:
        vps = await cloud.vps.create({"name": "web-1", "image": "ubuntu-24.04", ...})
        await cloud.vps.delete(vps["id"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger

from cirrus.api import ControlPlaneAPI
from cirrus.config import CirrusConfig, resolve_config
from cirrus.engine.clock import Clock
from cirrus.resources.base import ResourceService, RestService
from cirrus.resources.cache import CacheService
from cirrus.resources.database import DatabaseService
from cirrus.resources.firewalls import FirewallService
from cirrus.resources.registry import RESOURCE_SERVICES
from cirrus.resources.serverless import ServerlessService
from cirrus.resources.snapshots import (
    CacheSnapshotService,
    DatabaseSnapshotService,
    VpsSnapshotService,
)
from cirrus.resources.ssh_keys import SshKeyService
from cirrus.resources.storage import AccessKeyService, BucketService
from cirrus.resources.vps import VpsService
from cirrus.types import ResourceKind


class Cirrus:
    """Async control-plane client.

    Services share one HTTP session; concurrent operations on different
    resources are independent. Close the client (or use ``async with``)
    to release the session.

    Args:
        config: Ready-made configuration. When omitted, one is resolved
            from cirrus.toml, the environment and ``overrides``.
        clock: Time source for waits; tests inject a fake one.
        project_dir: Where to look for cirrus.toml.
        **overrides: Any ``CirrusConfig`` field, e.g. ``api_token``.
    """

    vps: VpsService
    databases: DatabaseService
    caches: CacheService
    buckets: BucketService
    serverless: ServerlessService
    vps_snapshots: VpsSnapshotService
    database_snapshots: DatabaseSnapshotService
    cache_snapshots: CacheSnapshotService
    ssh_keys: SshKeyService
    firewalls: FirewallService
    access_keys: AccessKeyService

    def __init__(
        self,
        config: CirrusConfig | None = None,
        *,
        clock: Clock | None = None,
        project_dir: Path | None = None,
        api: ControlPlaneAPI | None = None,
        **overrides: Any,
    ) -> None:
        self.config = config or resolve_config(project_dir=project_dir, **overrides)
        self._api = api or ControlPlaneAPI(self.config)
        self._services: dict[ResourceKind, RestService] = {}
        for kind, cls in RESOURCE_SERVICES.items():
            if issubclass(cls, ResourceService):
                self._services[kind] = cls(self._api, clock=clock)
            else:
                self._services[kind] = cls(self._api)

        self.vps = self._services[ResourceKind.VPS]  # type: ignore[assignment]
        self.databases = self._services[ResourceKind.DATABASE]  # type: ignore[assignment]
        self.caches = self._services[ResourceKind.CACHE]  # type: ignore[assignment]
        self.buckets = self._services[ResourceKind.BUCKET]  # type: ignore[assignment]
        self.serverless = self._services[ResourceKind.SERVERLESS]  # type: ignore[assignment]
        self.vps_snapshots = self._services[ResourceKind.VPS_SNAPSHOT]  # type: ignore[assignment]
        self.database_snapshots = self._services[ResourceKind.DATABASE_SNAPSHOT]  # type: ignore[assignment]
        self.cache_snapshots = self._services[ResourceKind.CACHE_SNAPSHOT]  # type: ignore[assignment]
        self.ssh_keys = self._services[ResourceKind.SSH_KEY]  # type: ignore[assignment]
        self.firewalls = self._services[ResourceKind.FIREWALL]  # type: ignore[assignment]
        self.access_keys = self._services[ResourceKind.ACCESS_KEY]  # type: ignore[assignment]
        logger.bind(component="client").debug(
            "Cirrus client for {url}", url=self.config.base_url
        )

    def service(self, kind: ResourceKind) -> RestService:
        return self._services[kind]

    async def close(self) -> None:
        await self._api.close()

    async def __aenter__(self) -> Cirrus:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
