"""Shared operations for every resource kind.

A service is a thin marshaling layer: it turns typed parameters into
requests and wires its kind's timeouts, poll interval and status
vocabulary into the shared poller and teardown sequence. Subclasses only
declare class attributes and add kind-specific endpoints.

``RestService`` covers kinds whose writes take effect immediately (SSH
keys, firewalls, access keys). ``ResourceService`` adds the status
lifecycle: creates wait for the ready status and deletes run the
teardown sequence.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger

from cirrus.api import ControlPlaneAPI
from cirrus.config import KindTimeouts
from cirrus.engine.clock import Clock
from cirrus.engine.pagination import collect_pages, parse_page
from cirrus.engine.teardown import Action, Lifecycle, teardown
from cirrus.engine.wait import DEFAULT_TERMINAL
from cirrus.errors import ResourceNotFound, is_not_found
from cirrus.types import Page, ResourceHandle, ResourceKind, Status

T = TypeVar("T", bound=Mapping[str, Any])


class RestService(Generic[T]):
    kind: ClassVar[ResourceKind]
    path: ClassVar[str]
    envelope: ClassVar[str] = "instance"

    def __init__(self, api: ControlPlaneAPI) -> None:
        self._api = api
        self._log = logger.bind(kind=self.kind.value, component="service")

    def _item_path(self, resource_id: str | int, action: str | None = None) -> str:
        base = f"{self.path}/{resource_id}"
        return f"{base}/{action}" if action else base

    def _unwrap(self, payload: Mapping[str, Any] | None) -> T:
        payload = payload or {}
        return payload.get(self.envelope, payload)  # type: ignore[return-value]

    # =========================================================================
    # Reads
    # =========================================================================

    async def get(self, resource_id: str | int) -> T:
        """Fetch one resource.

        Raises:
            ResourceNotFound: The control plane does not know ``resource_id``.
        """
        try:
            payload = await self._api.get(self._item_path(resource_id))
        except Exception as e:
            if is_not_found(e):
                raise ResourceNotFound(self.kind, str(resource_id)) from e
            raise
        return self._unwrap(payload)

    async def list_all(self) -> list[T]:
        """Every resource of this kind, across all pages."""

        async def fetch_page(page: int) -> Page[T]:
            return parse_page(await self._api.get(self.path, params={"page": page}))

        return await collect_pages(fetch_page)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, params: Mapping[str, Any]) -> T:
        created = self._unwrap(await self._api.send("POST", self.path, json=dict(params)))
        self._log.info("Created {kind} {id}", kind=self.kind.label, id=created.get("id"))
        return created

    async def update(self, resource_id: str | int, params: Mapping[str, Any]) -> T:
        return self._unwrap(
            await self._api.send("PUT", self._item_path(resource_id), json=dict(params))
        )

    async def delete(self, resource_id: str | int) -> None:
        """Delete the resource. One that is already gone counts as deleted."""
        try:
            await self._delete_request(resource_id)
        except Exception as e:
            if not is_not_found(e):
                raise
            self._log.debug(
                "{kind} {id} already gone", kind=self.kind.label, id=resource_id
            )

    async def _delete_request(self, resource_id: str | int) -> None:
        await self._api.send("DELETE", self._item_path(resource_id))

    async def _action(self, resource_id: str | int, action: str, body: Any = None) -> Any:
        self._log.debug(
            "{action} {kind} {id}", action=action, kind=self.kind.label, id=resource_id
        )
        return await self._api.send("POST", self._item_path(resource_id, action), json=body)


class ResourceService(RestService[T]):
    ready_status: ClassVar[Status] = Status.RUNNING
    terminal_statuses: ClassVar[frozenset[Status]] = DEFAULT_TERMINAL
    poll_interval: ClassVar[float] = 10.0
    requires_stop_before_delete: ClassVar[bool] = False
    waits_after_update: ClassVar[bool] = True
    default_timeouts: ClassVar[KindTimeouts]

    def __init__(
        self,
        api: ControlPlaneAPI,
        *,
        timeouts: KindTimeouts | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(api)
        self.timeouts = timeouts or api.config.timeouts_for(self.kind, self.default_timeouts)
        self._clock = clock
        self.lifecycle = self._build_lifecycle()

    def _build_lifecycle(self, stop: Action | None = None) -> Lifecycle:
        return Lifecycle(
            kind=self.kind,
            fetch_status=self.status,
            delete=self._delete_request,
            stop=stop,
            requires_stop_before_delete=self.requires_stop_before_delete,
            terminal_statuses=self.terminal_statuses,
            poll_interval=self.poll_interval,
        )

    async def status(self, resource_id: str) -> Status:
        resource = await self.get(resource_id)
        return Status.parse(resource.get("status"))

    async def handle(self, resource_id: str) -> ResourceHandle:
        return ResourceHandle(self.kind, resource_id, await self.status(resource_id))

    async def wait(
        self,
        resource_id: str,
        target: Status | None = None,
        *,
        timeout: float | None = None,
    ) -> Status:
        """Wait for ``target`` (default: this kind's ready status)."""
        return await self.lifecycle.wait(
            resource_id,
            target or self.ready_status,
            timeout=timeout if timeout is not None else self.timeouts.create,
            clock=self._clock,
        )

    async def create(self, params: Mapping[str, Any], *, timeout: float | None = None) -> T:
        """Create the resource and return it once it is ready."""
        created = self._unwrap(await self._api.send("POST", self.path, json=dict(params)))
        resource_id = str(created["id"])
        self._log.info(
            "Created {kind} {id}, waiting for {status}",
            kind=self.kind.label, id=resource_id, status=self.ready_status.value,
        )
        await self.wait(
            resource_id,
            self.ready_status,
            timeout=timeout if timeout is not None else self.timeouts.create,
        )
        return await self.get(resource_id)

    async def update(
        self,
        resource_id: str,
        params: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> T:
        updated = self._unwrap(
            await self._api.send("PUT", self._item_path(resource_id), json=dict(params))
        )
        if not self.waits_after_update:
            return updated

        await self.wait(
            resource_id,
            self.ready_status,
            timeout=timeout if timeout is not None else self.timeouts.update,
        )
        return await self.get(resource_id)

    async def delete(self, resource_id: str, *, timeout: float | None = None) -> None:
        """Tear the resource down and wait until it is gone."""
        await teardown(
            self.lifecycle,
            resource_id,
            timeout=timeout if timeout is not None else self.timeouts.delete,
            clock=self._clock,
        )


class PowerControlledService(ResourceService[T]):
    """A kind that can be started and stopped, and must be stopped to delete."""

    requires_stop_before_delete = True

    def _build_lifecycle(self, stop: Action | None = None) -> Lifecycle:
        return super()._build_lifecycle(stop=stop or self.stop)

    async def start(self, resource_id: str) -> None:
        """Ask the control plane to start the resource. Does not wait."""
        await self._action(resource_id, "start")

    async def stop(self, resource_id: str) -> None:
        """Ask the control plane to stop the resource. Does not wait."""
        await self._action(resource_id, "stop")
