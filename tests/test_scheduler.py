"""Periodic pass driver."""
import asyncio

from market_resolver.services import PassSummary, run_periodically
from tests.conftest import NOW


class CountingResolver:
    def __init__(self, errors=(), stop_event=None, stop_after=None):
        self.calls = 0
        self._errors = list(errors)
        self._stop_event = stop_event
        self._stop_after = stop_after

    async def run_pass(self):
        self.calls += 1
        if self._stop_event is not None and self.calls == self._stop_after:
            self._stop_event.set()
        if self._errors:
            error = self._errors.pop(0)
            if error is not None:
                raise error
        return PassSummary(started_at=NOW)


def test_runs_until_max_passes():
    resolver = CountingResolver()

    async def go():
        return await run_periodically(resolver, 0.01, asyncio.Event(), max_passes=3)

    summaries = asyncio.run(go())
    assert resolver.calls == 3
    assert len(summaries) == 3


def test_stop_event_ends_the_loop():
    async def go():
        stop = asyncio.Event()
        resolver = CountingResolver(stop_event=stop, stop_after=2)
        summaries = await run_periodically(resolver, 0.01, stop)
        return resolver, summaries

    resolver, summaries = asyncio.run(go())
    assert resolver.calls == 2
    assert len(summaries) == 2


def test_crashed_pass_does_not_stop_the_loop():
    resolver = CountingResolver(errors=[RuntimeError("db down"), None])

    async def go():
        return await run_periodically(resolver, 0.01, asyncio.Event(), max_passes=2)

    summaries = asyncio.run(go())
    assert resolver.calls == 2
    assert len(summaries) == 1


def test_no_pass_when_stopped_before_first_interval():
    resolver = CountingResolver()

    async def go():
        stop = asyncio.Event()
        stop.set()
        return await run_periodically(resolver, 60, stop, run_on_start=False)

    assert asyncio.run(go()) == []
    assert resolver.calls == 0
