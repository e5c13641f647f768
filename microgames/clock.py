from __future__ import annotations

import asyncio
import logging
import time

from microgames.session import SessionOrchestrator

logger = logging.getLogger(__name__)


async def run_clock(*, session: SessionOrchestrator, hz: float, stop: asyncio.Event) -> None:
    """Tick the session at a fixed rate until `stop` is set.

    Uses the measured wall-clock delta so a slow iteration doesn't stretch rounds.
    """

    if hz <= 0:
        raise ValueError("hz must be > 0")

    interval = 1.0 / hz
    last = time.monotonic()
    logger.info("Session clock running at %.1f Hz", hz)

    while not stop.is_set():
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass

        now = time.monotonic()
        delta, last = now - last, now
        if stop.is_set():
            break
        await session.tick(delta)

    logger.info("Session clock stopped")
