import pytest

import core.pacing as pacing_mod
import core.throttle as throttle_mod


class FakeClock:
    """Deterministic stand-in for time.monotonic / time.sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    async def async_sleep(self, seconds: float) -> None:
        self.sleep(seconds)

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    c = FakeClock()
    monkeypatch.setattr(throttle_mod.time, "monotonic", c.monotonic)
    monkeypatch.setattr(throttle_mod.time, "sleep", c.sleep)
    monkeypatch.setattr(pacing_mod.asyncio, "sleep", c.async_sleep)
    return c
