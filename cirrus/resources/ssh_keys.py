"""SSH public keys that can be injected into new VPS instances."""

from __future__ import annotations

from cirrus.engine.pagination import parse_page
from cirrus.resources.base import RestService
from cirrus.resources.types import CreateSshKeyParams, SshKey
from cirrus.types import ResourceKind


class SshKeyService(RestService[SshKey]):
    kind = ResourceKind.SSH_KEY
    path = "/ssh-keys"
    envelope = "key"

    async def create(self, params: CreateSshKeyParams) -> SshKey:  # type: ignore[override]
        return await super().create(params)

    async def update(self, resource_id: str | int, params: object) -> SshKey:  # type: ignore[override]
        raise NotImplementedError("SSH keys cannot be updated, create a new one")

    async def list_all(self) -> list[SshKey]:
        # Unpaginated: one request returns every key.
        return parse_page(await self._api.get(self.path)).items
