import asyncio
import contextlib
import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class TickDriver:
    """Calls ``tick`` every ``interval_s`` seconds on the running event loop.

    The tick callable is synchronous, so cancellation can only land on the
    sleep between ticks and a tick is never left half applied.
    """

    def __init__(self, tick: Callable[[], Any], interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._tick = tick
        self.interval_s = float(interval_s)
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        if self.running:
            return False
        dead = self._task
        if dead is not None and not dead.cancelled():
            dead.exception()  # a failed run, already logged by _run
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("ticker started (interval=%.2fs)", self.interval_s)
        return True

    async def stop(self) -> bool:
        task = self._task
        if task is None:
            return False
        self._task = None
        if task.done():
            if not task.cancelled():
                task.exception()  # already logged by _run
            return False
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("ticker stopped after %d ticks", self.ticks)
        return True

    def status(self) -> Dict[str, Any]:
        return {"running": self.running, "interval_s": self.interval_s, "ticks": self.ticks}

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            try:
                self._tick()
            except Exception:
                logger.exception("tick failed, ticker stopping")
                raise
            self.ticks += 1
