"""Periodic driver for resolution passes."""
import asyncio
import logging

from market_resolver.services.resolver import PassSummary, ResolverService

logger = logging.getLogger(__name__)


async def run_periodically(
    resolver: ResolverService,
    interval_seconds: float,
    stop_event: asyncio.Event,
    *,
    run_on_start: bool = True,
    max_passes: int | None = None,
) -> list[PassSummary]:
    """Run a pass every interval_seconds until stop_event is set.

    A failing pass is logged and the loop carries on. Passes never overlap:
    a trigger that lands while one is running is a no-op inside the resolver.

    Args:
        resolver: The orchestrator to drive.
        interval_seconds: Seconds to wait between pass starts.
        stop_event: When set, the loop exits after the current pass.
        run_on_start: Run immediately instead of waiting one interval first.
        max_passes: Stop after this many passes (None = until stopped).

    Returns:
        Summaries of the passes that ran, oldest first.
    """
    summaries: list[PassSummary] = []
    passes = 0
    if not run_on_start and await _wait(stop_event, interval_seconds):
        return summaries

    while not stop_event.is_set():
        passes += 1
        try:
            summaries.append(await resolver.run_pass())
        except Exception:  # pylint: disable=broad-except
            logger.exception("Resolution pass #%d crashed", passes)
        if max_passes is not None and passes >= max_passes:
            break
        logger.info("Next resolution pass in %.0fs", interval_seconds)
        if await _wait(stop_event, interval_seconds):
            break
    return summaries


async def _wait(stop_event: asyncio.Event, timeout: float) -> bool:
    """Sleep up to timeout; True if stop_event was set meanwhile."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout)
        return True
    except asyncio.TimeoutError:
        return False
