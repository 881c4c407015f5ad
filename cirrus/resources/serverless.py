from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cirrus.config import KindTimeouts
from cirrus.resources.base import ResourceService
from cirrus.resources.types import (
    CreateServerlessParams,
    ServerlessContainer,
    UpdateServerlessParams,
)
from cirrus.types import ResourceKind, Status


class ServerlessService(ResourceService[ServerlessContainer]):
    """Serverless containers, built from an image or a git repository.

    Builds can end in ``failed`` as well as ``error``. No start/stop;
    deletes are accepted in any state.
    """

    kind = ResourceKind.SERVERLESS
    path = "/serverless"
    envelope = "container"
    terminal_statuses = frozenset({Status.ERROR, Status.FAILED})
    default_timeouts = KindTimeouts(create=15 * 60, update=15 * 60, delete=10 * 60)

    def _unwrap(self, payload: Mapping[str, Any] | None) -> ServerlessContainer:
        container = dict(super()._unwrap(payload))
        # The show response carries the public URL next to the container.
        if payload and payload.get("url"):
            container["url"] = payload["url"]
        return container  # type: ignore[return-value]

    async def create(  # type: ignore[override]
        self, params: CreateServerlessParams, *, timeout: float | None = None
    ) -> ServerlessContainer:
        return await super().create(params, timeout=timeout)

    async def update(  # type: ignore[override]
        self, resource_id: str, params: UpdateServerlessParams, *, timeout: float | None = None
    ) -> ServerlessContainer:
        return await super().update(resource_id, params, timeout=timeout)
