"""Point-in-time snapshots of VPS, database and cache instances.

The control plane has no single-snapshot endpoint, so reads list every
snapshot of the kind and pick the matching id. Snapshots become
``completed`` rather than ``running``; ``failed`` or ``error`` end a wait.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from cirrus.config import KindTimeouts
from cirrus.errors import ResourceNotFound
from cirrus.resources.base import ResourceService
from cirrus.resources.types import (
    CacheSnapshot,
    CreateCacheSnapshotParams,
    CreateDatabaseSnapshotParams,
    CreateVpsSnapshotParams,
    DatabaseSnapshot,
    VpsSnapshot,
)
from cirrus.types import ResourceKind, Status

T = TypeVar("T", bound=Mapping[str, Any])


class SnapshotService(ResourceService[T]):
    envelope = "snapshot"
    ready_status = Status.COMPLETED
    terminal_statuses = frozenset({Status.ERROR, Status.FAILED})
    poll_interval = 5.0
    default_timeouts = KindTimeouts(create=30 * 60, update=30 * 60, delete=10 * 60)

    async def get(self, resource_id: str | int) -> T:
        """Find one snapshot by id.

        Raises:
            ResourceNotFound: No snapshot of this kind has ``resource_id``.
        """
        wanted = str(resource_id)
        for snapshot in await self.list_all():
            if str(snapshot.get("id")) == wanted:
                return snapshot
        raise ResourceNotFound(self.kind, wanted)

    async def update(self, resource_id: str, params: Mapping[str, Any], **_: Any) -> T:
        raise NotImplementedError(f"{self.kind.label}s cannot be updated, create a new one")

    async def restore(self, snapshot_id: str) -> None:
        """Roll the source instance back to this snapshot. Does not wait.

        The instance goes through ``restoring``; wait on the instance's own
        service to know when it is usable again.
        """
        self._log.info("Restoring {kind} {id}", kind=self.kind.label, id=snapshot_id)
        await self._action(snapshot_id, "restore")


class VpsSnapshotService(SnapshotService[VpsSnapshot]):
    kind = ResourceKind.VPS_SNAPSHOT
    path = "/snapshots/vps"

    async def create(  # type: ignore[override]
        self, params: CreateVpsSnapshotParams, *, timeout: float | None = None
    ) -> VpsSnapshot:
        return await super().create(params, timeout=timeout)


class DatabaseSnapshotService(SnapshotService[DatabaseSnapshot]):
    kind = ResourceKind.DATABASE_SNAPSHOT
    path = "/snapshots/database"

    async def create(  # type: ignore[override]
        self, params: CreateDatabaseSnapshotParams, *, timeout: float | None = None
    ) -> DatabaseSnapshot:
        return await super().create(params, timeout=timeout)


class CacheSnapshotService(SnapshotService[CacheSnapshot]):
    kind = ResourceKind.CACHE_SNAPSHOT
    path = "/snapshots/cache"

    async def create(  # type: ignore[override]
        self, params: CreateCacheSnapshotParams, *, timeout: float | None = None
    ) -> CacheSnapshot:
        return await super().create(params, timeout=timeout)
