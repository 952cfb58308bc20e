"""Background loop that polls for changes and notifies subscribers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from freshwind.logging import get_logger

if TYPE_CHECKING:
    from freshwind.server.registry import ReloadRegistry
    from freshwind.watching.scanner import ChangeDetector

log = get_logger("watching")


class WatchLoop:
    """Drives a change detector on a fixed interval.

    Each tick runs the detector in a worker thread so a large tree does not
    stall request handling, then broadcasts a reload if it reported change.
    A failing tick is logged and the loop carries on; the loop only ends
    when its task is cancelled.

    Example:
        loop = WatchLoop(ChangeScanner(root, filters), registry, interval=1.0)
        task = asyncio.create_task(loop.run())
    """

    def __init__(
        self,
        detector: ChangeDetector,
        registry: ReloadRegistry,
        interval: float = 1.0,
    ) -> None:
        self._detector = detector
        self._registry = registry
        self._interval = interval
        self._ticks = 0

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self._interval

    @property
    def ticks(self) -> int:
        """Number of completed ticks."""
        return self._ticks

    async def tick(self) -> bool:
        """Run one scan and broadcast if anything changed.

        Returns:
            True if a change was detected.
        """
        changed = await asyncio.to_thread(self._detector.check)
        if changed:
            await self._registry.broadcast()
        return changed

    async def run(self) -> None:
        """Tick forever."""
        log.info("Watching for changes (interval: %.3fs)", self._interval)
        try:
            while True:
                try:
                    await self.tick()
                except Exception:
                    log.exception("Error during watch tick")
                self._ticks += 1
                await asyncio.sleep(self._interval)
        except asyncio.CancelledError:
            log.info("Watch loop cancelled")
            raise
