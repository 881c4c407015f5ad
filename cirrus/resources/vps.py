"""Virtual machines (VPS).

Must be stopped before the control plane accepts a delete. Resizing a
VPS restarts it, so ``update`` waits for ``running`` again.
"""

from __future__ import annotations

from typing import Any

from cirrus.config import KindTimeouts
from cirrus.resources.base import PowerControlledService
from cirrus.resources.types import (
    CreateVpsParams,
    ReinstallVpsParams,
    UpdateVpsParams,
    VpsImage,
    VpsInstance,
)
from cirrus.types import ResourceKind, Status


class VpsService(PowerControlledService[VpsInstance]):
    kind = ResourceKind.VPS
    path = "/vps"
    envelope = "instance"
    default_timeouts = KindTimeouts(create=30 * 60, update=30 * 60, delete=15 * 60)

    async def status(self, resource_id: str) -> Status:
        # VPS exposes a dedicated, cheaper status route.
        payload: dict[str, Any] = await self._api.get(self._item_path(resource_id, "status"))
        return Status.parse((payload or {}).get("status"))

    async def create(  # type: ignore[override]
        self, params: CreateVpsParams, *, timeout: float | None = None
    ) -> VpsInstance:
        return await super().create(params, timeout=timeout)

    async def update(  # type: ignore[override]
        self, resource_id: str, params: UpdateVpsParams, *, timeout: float | None = None
    ) -> VpsInstance:
        return await super().update(resource_id, params, timeout=timeout)

    async def reboot(self, resource_id: str) -> None:
        """Ask the control plane to reboot the VPS. Does not wait."""
        await self._action(resource_id, "reboot")

    async def reinstall(self, resource_id: str, params: ReinstallVpsParams) -> None:
        """Reinstall the VPS from a new OS image. Does not wait."""
        await self._action(resource_id, "reinstall", dict(params))

    async def images(self) -> list[VpsImage]:
        payload = await self._api.get(f"{self.path}/images")
        return list((payload or {}).get("images") or [])
