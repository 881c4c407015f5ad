"""Firewalls: rule sets attached to VPS instances.

Changes to a firewall (rules, attachments) are staged by the control
plane until ``deploy`` pushes them to the attached instances.
"""

from __future__ import annotations

from typing import Literal, TypeAlias

from cirrus.resources.base import RestService
from cirrus.resources.types import CreateFirewallParams, Firewall, UpdateFirewallParams
from cirrus.types import ResourceKind

InstanceType: TypeAlias = Literal["vps"]


class FirewallService(RestService[Firewall]):
    kind = ResourceKind.FIREWALL
    path = "/firewalls"
    envelope = "firewall"

    async def create(self, params: CreateFirewallParams) -> Firewall:  # type: ignore[override]
        return await super().create(params)

    async def update(  # type: ignore[override]
        self, resource_id: str, params: UpdateFirewallParams
    ) -> Firewall:
        return await super().update(resource_id, params)

    async def attach(
        self, firewall_id: str, instance_id: str, instance_type: InstanceType = "vps"
    ) -> None:
        await self._action(
            firewall_id,
            "attach",
            {"instance_type": instance_type, "instance_id": instance_id},
        )

    async def detach(
        self, firewall_id: str, instance_id: str, instance_type: InstanceType = "vps"
    ) -> None:
        await self._action(
            firewall_id,
            "detach",
            {"instance_type": instance_type, "instance_id": instance_id},
        )

    async def deploy(self, firewall_id: str) -> None:
        """Push the staged rules to every attached instance."""
        self._log.info("Deploying firewall {id}", id=firewall_id)
        await self._action(firewall_id, "deploy")
