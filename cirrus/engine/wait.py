"""Status polling shared by every resource kind.

One algorithm, parametrised by the status fetcher, the target, the
terminal-failure vocabulary and the poll interval:

1. Check immediately; the resource may already be there.
2. Sleep one interval, give up if the deadline has passed, check again.

A 404 while waiting for ``Status.DELETED`` counts as success. Any other
fetch failure ends the wait: retrying reads is the client's job, not the
poller's.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeAlias

from loguru import logger

from cirrus.engine.clock import Clock, MonotonicClock
from cirrus.errors import (
    StatusCheckFailed,
    TerminalStatusError,
    WaitTimeout,
    is_not_found,
)
from cirrus.types import Status, WaitDescriptor

StatusFetcher: TypeAlias = Callable[[str], Awaitable[Status]]

DEFAULT_TERMINAL = frozenset({Status.ERROR})


async def wait_for_status(
    resource_id: str,
    fetch_status: StatusFetcher,
    target: Status,
    *,
    timeout: float,
    interval: float = 10.0,
    terminal: frozenset[Status] = DEFAULT_TERMINAL,
    clock: Clock | None = None,
    description: str = "resource",
) -> Status:
    """Block until ``resource_id`` reaches ``target``.

    Args:
        resource_id: Server-assigned id of the resource.
        fetch_status: Coroutine function returning the current status.
        target: Status to wait for. ``Status.DELETED`` accepts a 404.
        timeout: Seconds before giving up.
        interval: Seconds between checks after the first one.
        terminal: Statuses that mean the control plane gave up.
        clock: Time source; defaults to the event loop clock.
        description: Human-readable kind used in errors and logs.

    Returns:
        The status that satisfied the wait.

    Raises:
        TerminalStatusError: A status in ``terminal`` other than ``target``.
        WaitTimeout: The deadline passed first.
        StatusCheckFailed: A status fetch failed for a reason other than
            a 404 while waiting for deletion.
    """
    clock = clock or MonotonicClock()
    wait = WaitDescriptor(id=resource_id, target=target, deadline=clock.now() + timeout)
    log = logger.bind(component="wait", resource_id=resource_id)
    log.debug(
        "Waiting for {description} to reach {target} (timeout {timeout:.0f}s)",
        description=description, target=target.value, timeout=timeout,
    )

    last: Status | None = None
    checks = 0
    while True:
        if checks:
            await clock.sleep(interval)
            if clock.now() > wait.deadline:
                raise WaitTimeout(description, wait.id, wait.target, last)
        checks += 1

        try:
            last = await fetch_status(wait.id)
        except Exception as e:
            if wait.target is Status.DELETED and is_not_found(e):
                log.debug("{description} is gone", description=description)
                return Status.DELETED
            raise StatusCheckFailed(description, wait.id, e, last) from e

        if last is wait.target:
            log.debug(
                "{description} reached {status} after {checks} check(s)",
                description=description, status=last.value, checks=checks,
            )
            return last
        if last in terminal:
            raise TerminalStatusError(description, wait.id, last)

        log.trace("{description} is {status}", description=description, status=last.value)
