"""Delete sequencing for asynchronously provisioned resources.

Some kinds (VPS, database, cache) must be ``stopped`` before the control
plane accepts a delete, and refuse stop requests while still
provisioning. Others (buckets, serverless containers) accept a delete in
any state. ``teardown`` handles both from a single ``Lifecycle``.

Steps run strictly one after another and share one deadline. Nothing is
rolled back: a failure leaves the resource exactly as last observed and
the ``TeardownError`` says which step failed and what that status was.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeAlias

from loguru import logger

from cirrus.engine.clock import Clock, MonotonicClock
from cirrus.engine.wait import DEFAULT_TERMINAL, StatusFetcher, wait_for_status
from cirrus.errors import (
    StateError,
    TeardownError,
    TeardownStep,
    is_not_found,
)
from cirrus.types import SETTLING_STATUSES, ResourceKind, Status

Action: TypeAlias = Callable[[str], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Lifecycle:
    """What the engine needs to know to wait on and tear down one kind."""

    kind: ResourceKind
    fetch_status: StatusFetcher
    delete: Action
    stop: Action | None = None
    requires_stop_before_delete: bool = False
    terminal_statuses: frozenset[Status] = DEFAULT_TERMINAL
    poll_interval: float = 10.0

    def __post_init__(self) -> None:
        if self.requires_stop_before_delete and self.stop is None:
            raise ValueError(f"{self.kind.label} requires a stop action before delete")

    async def wait(
        self,
        resource_id: str,
        target: Status,
        *,
        timeout: float,
        clock: Clock | None = None,
    ) -> Status:
        return await wait_for_status(
            resource_id,
            self.fetch_status,
            target,
            timeout=timeout,
            interval=self.poll_interval,
            terminal=self.terminal_statuses,
            clock=clock,
            description=self.kind.label,
        )


class _Teardown:
    def __init__(
        self, lifecycle: Lifecycle, resource_id: str, timeout: float, clock: Clock
    ) -> None:
        self.lifecycle = lifecycle
        self.resource_id = resource_id
        self.clock = clock
        self.deadline = clock.now() + timeout
        self.status: Status | None = None
        self.log = logger.bind(
            kind=lifecycle.kind.value, component="teardown", resource_id=resource_id
        )

    def fail(self, step: TeardownStep, err: BaseException | str) -> TeardownError:
        return TeardownError(
            self.lifecycle.kind, self.resource_id, step, self.status, str(err)
        )

    def remaining(self) -> float:
        return max(self.deadline - self.clock.now(), 0.0)

    async def fetch(self, step: TeardownStep) -> Status:
        try:
            self.status = await self.lifecycle.fetch_status(self.resource_id)
        except Exception as e:
            if is_not_found(e):
                self.status = Status.DELETED
            else:
                raise self.fail(step, e) from e
        return self.status

    async def wait(self, target: Status, step: TeardownStep) -> None:
        try:
            self.status = await self.lifecycle.wait(
                self.resource_id, target, timeout=self.remaining(), clock=self.clock
            )
        except StateError as e:
            self.status = e.last_status or self.status
            raise self.fail(step, e) from e

    async def run(self) -> None:
        lifecycle = self.lifecycle
        if await self.fetch(TeardownStep.CHECK) is Status.DELETED:
            self.log.debug("Already deleted")
            return

        if lifecycle.requires_stop_before_delete:
            if not await self.ensure_stopped():
                return

        self.log.info("Deleting {kind}", kind=lifecycle.kind.label)
        try:
            await lifecycle.delete(self.resource_id)
        except Exception as e:
            if is_not_found(e):
                self.log.debug("Deleted concurrently")
                return
            raise self.fail(TeardownStep.DELETE, e) from e

        await self.wait(Status.DELETED, TeardownStep.AWAIT_DELETED)
        self.log.info("{kind} deleted", kind=lifecycle.kind.label)

    async def ensure_stopped(self) -> bool:
        """Bring the resource to a deletable state. False if it vanished."""
        assert self.status is not None
        assert self.lifecycle.stop is not None

        if self.status in SETTLING_STATUSES:
            self.log.info(
                "Waiting for stable state before deletion (status {status})",
                status=self.status.value,
            )
            try:
                self.status = await self.lifecycle.wait(
                    self.resource_id,
                    Status.RUNNING,
                    timeout=self.remaining(),
                    clock=self.clock,
                )
            except StateError as settle_err:
                if await self.fetch(TeardownStep.SETTLE) is Status.DELETED:
                    return False
                if self.status not in (Status.ERROR, Status.STOPPED):
                    raise self.fail(
                        TeardownStep.SETTLE,
                        f"{self.lifecycle.kind.label} is in state "
                        f"{self.status.value}, cannot delete",
                    ) from settle_err

        match self.status:
            case Status.STOPPED | Status.DELETED | Status.ERROR:
                return True
            case Status.STOPPING:
                self.log.info("Already stopping")
            case _:
                self.log.info(
                    "Stopping before deletion (status {status})", status=self.status.value
                )
                try:
                    await self.lifecycle.stop(self.resource_id)
                except Exception as e:
                    raise self.fail(TeardownStep.STOP, e) from e

        await self.wait(Status.STOPPED, TeardownStep.AWAIT_STOPPED)
        return True


async def teardown(
    lifecycle: Lifecycle,
    resource_id: str,
    *,
    timeout: float,
    clock: Clock | None = None,
) -> None:
    """Delete ``resource_id`` and wait until the control plane forgets it.

    Deleting something that is already gone succeeds without issuing any
    stop or delete request.

    Raises:
        TeardownError: A step failed; ``step`` and ``last_status`` say where.
    """
    await _Teardown(lifecycle, resource_id, timeout, clock or MonotonicClock()).run()
