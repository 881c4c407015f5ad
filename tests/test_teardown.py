from __future__ import annotations

import asyncio

import pytest

from cirrus.engine.teardown import Lifecycle, teardown
from cirrus.errors import APIError, TeardownError, TeardownStep
from cirrus.types import ResourceKind, Status
from tests.conftest import FakeClock, StalledClock

pytestmark = [pytest.mark.unit]

GONE = APIError(status_code=404, message="not found")


class FakeResource:
    """Scripted control plane for one resource.

    ``statuses`` are returned by successive status checks (the last one
    repeats). ``after_stop`` / ``after_delete`` replace the script once
    the corresponding call is made.
    """

    def __init__(
        self,
        *statuses: Status | Exception,
        after_stop: tuple[Status | Exception, ...] = (Status.STOPPING, Status.STOPPED),
        after_delete: tuple[Status | Exception, ...] = (Status.DELETING, GONE),
        stop_error: Exception | None = None,
        delete_error: Exception | None = None,
    ) -> None:
        self.script = list(statuses)
        self.after_stop = after_stop
        self.after_delete = after_delete
        self.stop_error = stop_error
        self.delete_error = delete_error
        self.calls: list[str] = []

    async def fetch(self, resource_id: str) -> Status:
        self.calls.append("status")
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def stop(self, resource_id: str) -> None:
        self.calls.append("stop")
        if self.stop_error:
            raise self.stop_error
        self.script = list(self.after_stop)

    async def delete(self, resource_id: str) -> None:
        self.calls.append("delete")
        if self.delete_error:
            raise self.delete_error
        self.script = list(self.after_delete)

    def lifecycle(self, kind: ResourceKind = ResourceKind.VPS, *, stop: bool = True) -> Lifecycle:
        return Lifecycle(
            kind=kind,
            fetch_status=self.fetch,
            delete=self.delete,
            stop=self.stop if stop else None,
            requires_stop_before_delete=stop,
        )

    @property
    def actions(self) -> list[str]:
        return [c for c in self.calls if c != "status"]


@pytest.mark.asyncio
async def test_already_deleted_is_noop(clock: FakeClock):
    res = FakeResource(GONE)
    await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert res.actions == []


@pytest.mark.asyncio
async def test_running_is_stopped_then_deleted(clock: FakeClock):
    res = FakeResource(Status.RUNNING)
    await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert res.actions == ["stop", "delete"]
    # the delete is only issued once stopped has been observed
    assert res.calls.index("delete") > res.calls.index("stop") + 2


@pytest.mark.asyncio
async def test_stopped_skips_stop(clock: FakeClock):
    res = FakeResource(Status.STOPPED)
    await teardown(res.lifecycle(ResourceKind.DATABASE), "db-1", timeout=900, clock=clock)
    assert res.actions == ["delete"]


@pytest.mark.asyncio
async def test_stopping_waits_without_stop_call(clock: FakeClock):
    res = FakeResource(Status.STOPPING, Status.STOPPING, Status.STOPPED)
    await teardown(res.lifecycle(ResourceKind.CACHE), "c-1", timeout=900, clock=clock)
    assert res.actions == ["delete"]


@pytest.mark.asyncio
async def test_error_state_deleted_without_stop(clock: FakeClock):
    res = FakeResource(Status.ERROR)
    await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert res.actions == ["delete"]


@pytest.mark.asyncio
async def test_provisioning_settles_before_stop(clock: FakeClock):
    res = FakeResource(Status.PROVISIONING, Status.PROVISIONING, Status.RUNNING)
    await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert res.actions == ["stop", "delete"]


@pytest.mark.asyncio
async def test_settle_into_error_proceeds_to_delete(clock: FakeClock):
    res = FakeResource(Status.PENDING, Status.ERROR)
    await teardown(res.lifecycle(ResourceKind.DATABASE), "db-1", timeout=900, clock=clock)
    assert res.actions == ["delete"]


@pytest.mark.asyncio
async def test_settle_timeout_then_still_pending_fails(clock: FakeClock):
    res = FakeResource(Status.PENDING)
    with pytest.raises(TeardownError) as exc_info:
        await teardown(res.lifecycle(), "vps-1", timeout=60, clock=clock)
    assert exc_info.value.step is TeardownStep.SETTLE
    assert exc_info.value.last_status is Status.PENDING
    assert "cannot delete" in str(exc_info.value)
    assert res.actions == []


@pytest.mark.asyncio
async def test_vanishes_while_settling(clock: FakeClock):
    res = FakeResource(Status.PENDING, Status.PENDING, GONE)
    await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert res.actions == []


@pytest.mark.asyncio
async def test_stop_failure_reports_step(clock: FakeClock):
    res = FakeResource(Status.RUNNING, stop_error=APIError(status_code=500, message="boom"))
    with pytest.raises(TeardownError) as exc_info:
        await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert exc_info.value.step is TeardownStep.STOP
    assert exc_info.value.last_status is Status.RUNNING
    assert "delete" not in res.actions


@pytest.mark.asyncio
async def test_never_stops_times_out(clock: FakeClock):
    res = FakeResource(Status.RUNNING, after_stop=(Status.RUNNING,))
    with pytest.raises(TeardownError) as exc_info:
        await teardown(res.lifecycle(), "vps-1", timeout=120, clock=clock)
    assert exc_info.value.step is TeardownStep.AWAIT_STOPPED
    assert res.actions == ["stop"]
    assert clock.time <= 120 + 10


@pytest.mark.asyncio
async def test_delete_not_found_is_success(clock: FakeClock):
    res = FakeResource(Status.STOPPED, delete_error=GONE)
    await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert res.actions == ["delete"]


@pytest.mark.asyncio
async def test_delete_rejected(clock: FakeClock):
    res = FakeResource(Status.STOPPED, delete_error=APIError(status_code=409, message="locked"))
    with pytest.raises(TeardownError) as exc_info:
        await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert exc_info.value.step is TeardownStep.DELETE
    assert exc_info.value.last_status is Status.STOPPED


@pytest.mark.asyncio
async def test_check_failure(clock: FakeClock):
    res = FakeResource(APIError(status_code=500))
    with pytest.raises(TeardownError) as exc_info:
        await teardown(res.lifecycle(), "vps-1", timeout=900, clock=clock)
    assert exc_info.value.step is TeardownStep.CHECK


@pytest.mark.asyncio
async def test_bucket_deleted_in_any_state(clock: FakeClock):
    res = FakeResource(Status.PENDING)
    await teardown(res.lifecycle(ResourceKind.BUCKET, stop=False), "b-1", timeout=600, clock=clock)
    assert res.actions == ["delete"]


def test_lifecycle_requires_stop_action():
    async def noop(resource_id: str) -> None: ...

    async def status(resource_id: str) -> Status:
        return Status.RUNNING

    with pytest.raises(ValueError):
        Lifecycle(
            kind=ResourceKind.VPS,
            fetch_status=status,
            delete=noop,
            requires_stop_before_delete=True,
        )


@pytest.mark.asyncio
async def test_settle_timeout_then_stopped_deletes(clock: FakeClock):
    # check + four polls inside the 30s window see pending; the re-fetch sees stopped
    res = FakeResource(*[Status.PENDING] * 5, Status.STOPPED, after_delete=(GONE,))
    await teardown(res.lifecycle(), "vps-1", timeout=30, clock=clock)
    assert res.actions == ["delete"]
    assert clock.time == 40


@pytest.mark.asyncio
async def test_settle_timeout_leaves_no_time_for_deletion(clock: FakeClock):
    res = FakeResource(*[Status.PENDING] * 5, Status.STOPPED)
    with pytest.raises(TeardownError) as exc_info:
        await teardown(res.lifecycle(), "vps-1", timeout=30, clock=clock)
    assert res.actions == ["delete"]
    assert exc_info.value.step is TeardownStep.AWAIT_DELETED
    assert exc_info.value.last_status is Status.DELETING


@pytest.mark.asyncio
async def test_cancel_while_awaiting_stopped_skips_delete(stalled_clock: StalledClock):
    res = FakeResource(Status.RUNNING)
    task = asyncio.create_task(
        teardown(res.lifecycle(), "vps-1", timeout=900, clock=stalled_clock)
    )
    await stalled_clock.sleeping.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert res.actions == ["stop"]
    assert "delete" not in res.calls
