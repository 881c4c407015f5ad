from __future__ import annotations

import asyncio

import pytest


class FakeClock:
    """Deterministic clock: ``sleep`` advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.time = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.time

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds


class StalledClock(FakeClock):
    """``sleep`` never returns; ``sleeping`` is set once a poller is parked."""

    def __init__(self) -> None:
        super().__init__()
        self.sleeping = asyncio.Event()

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.sleeping.set()
        await asyncio.get_running_loop().create_future()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stalled_clock() -> StalledClock:
    return StalledClock()
