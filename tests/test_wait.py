from __future__ import annotations

import asyncio

import pytest

from cirrus.engine.wait import wait_for_status
from cirrus.errors import (
    APIError,
    StatusCheckFailed,
    TerminalStatusError,
    TransportError,
    WaitTimeout,
)
from cirrus.types import Status
from tests.conftest import FakeClock, StalledClock

pytestmark = [pytest.mark.unit]


def sequence(*items: Status | Exception):
    """Status fetcher replaying ``items``, repeating the last one."""
    calls: list[str] = []

    async def fetch(resource_id: str) -> Status:
        calls.append(resource_id)
        item = items[min(len(calls), len(items)) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    fetch.calls = calls  # type: ignore[attr-defined]
    return fetch


@pytest.mark.asyncio
async def test_reaches_target(clock: FakeClock):
    fetch = sequence(Status.PENDING, Status.PENDING, Status.RUNNING)
    result = await wait_for_status(
        "vps-123", fetch, Status.RUNNING, timeout=600, interval=10, clock=clock
    )
    assert result is Status.RUNNING
    assert len(fetch.calls) == 3
    assert clock.time == 20


@pytest.mark.asyncio
async def test_already_at_target_does_not_sleep(clock: FakeClock):
    fetch = sequence(Status.STOPPED)
    await wait_for_status("db-1", fetch, Status.STOPPED, timeout=60, clock=clock)
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_not_found_counts_as_deleted(clock: FakeClock):
    fetch = sequence(APIError(status_code=404))
    result = await wait_for_status("c-1", fetch, Status.DELETED, timeout=60, clock=clock)
    assert result is Status.DELETED
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_not_found_while_waiting_for_running_fails(clock: FakeClock):
    fetch = sequence(APIError(status_code=404))
    with pytest.raises(StatusCheckFailed):
        await wait_for_status("c-1", fetch, Status.RUNNING, timeout=60, clock=clock)


@pytest.mark.asyncio
async def test_error_status_short_circuits(clock: FakeClock):
    fetch = sequence(Status.PROVISIONING, Status.ERROR)
    with pytest.raises(TerminalStatusError) as exc_info:
        await wait_for_status(
            "vps-9", fetch, Status.RUNNING, timeout=600, clock=clock, description="VPS"
        )
    assert str(exc_info.value) == "VPS vps-9 entered error state"
    assert len(fetch.calls) == 2


@pytest.mark.asyncio
async def test_failed_is_terminal_only_when_configured(clock: FakeClock):
    terminal = frozenset({Status.ERROR, Status.FAILED})
    with pytest.raises(TerminalStatusError):
        await wait_for_status(
            "fn-1", sequence(Status.FAILED), Status.RUNNING,
            timeout=60, terminal=terminal, clock=clock,
        )

    with pytest.raises(WaitTimeout):
        await wait_for_status(
            "fn-1", sequence(Status.FAILED), Status.RUNNING, timeout=30, clock=clock,
        )


@pytest.mark.asyncio
async def test_timeout_respects_deadline(clock: FakeClock):
    fetch = sequence(Status.PENDING)
    with pytest.raises(WaitTimeout) as exc_info:
        await wait_for_status(
            "db-1", fetch, Status.RUNNING, timeout=35, interval=10, clock=clock,
            description="database",
        )
    assert clock.time <= 35 + 10
    assert exc_info.value.last_status is Status.PENDING
    assert "last status: pending" in str(exc_info.value)


@pytest.mark.asyncio
async def test_zero_timeout_checks_once(clock: FakeClock):
    fetch = sequence(Status.PENDING)
    with pytest.raises(WaitTimeout):
        await wait_for_status("x", fetch, Status.RUNNING, timeout=0, clock=clock)
    assert len(fetch.calls) == 1


@pytest.mark.asyncio
async def test_transport_failure_ends_wait(clock: FakeClock):
    cause = TransportError("GET", "/vps/1", "connection reset")
    fetch = sequence(Status.PENDING, cause)
    with pytest.raises(StatusCheckFailed) as exc_info:
        await wait_for_status("1", fetch, Status.RUNNING, timeout=60, clock=clock)
    assert exc_info.value.__cause__ is cause
    assert exc_info.value.last_status is Status.PENDING


@pytest.mark.asyncio
async def test_unknown_status_keeps_polling(clock: FakeClock):
    fetch = sequence(Status.UNKNOWN, Status.ACTIVE)
    result = await wait_for_status("b-1", fetch, Status.ACTIVE, timeout=60, interval=5, clock=clock)
    assert result is Status.ACTIVE
    assert clock.sleeps == [5]


@pytest.mark.asyncio
async def test_cancel_while_sleeping_propagates(stalled_clock: StalledClock):
    fetch = sequence(Status.PENDING)
    task = asyncio.create_task(
        wait_for_status("vps-1", fetch, Status.RUNNING, timeout=600, clock=stalled_clock)
    )
    await stalled_clock.sleeping.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert task.cancelled()
    assert len(fetch.calls) == 1
