"""
Pacing of successive gateway calls within one bulk send.
"""
import asyncio
import logging
from typing import Optional

logger = logging.getLogger("smsrelay.pacing")


class BatchPacer:
    """
    Keeps at least `interval` seconds between the end of one batch call and
    the start of the next.

    One pacer belongs to one bulk-send operation, so concurrent operations
    are paced independently. The first call never waits, and because the
    wait happens before a call rather than after it, nothing is slept once
    the final batch has gone out.
    """

    def __init__(self, interval: float):
        self.interval = max(0.0, interval)
        self._last_call_end: Optional[float] = None

    async def wait(self) -> None:
        """Sleep for whatever is left of the interval since the previous call ended."""
        if self._last_call_end is None:
            return

        elapsed = asyncio.get_running_loop().time() - self._last_call_end
        remaining_delay = self.interval - elapsed
        if remaining_delay > 0:
            logger.debug(f"Pacing next batch by {remaining_delay:.3f}s")
            await asyncio.sleep(remaining_delay)

    def mark(self) -> None:
        """Record that a batch call has just finished (successfully or not)."""
        self._last_call_end = asyncio.get_running_loop().time()
