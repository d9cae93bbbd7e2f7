"""Fixed-interval throttling for GitHub API calls."""

import asyncio
import time
from typing import Optional


class ThrottleGate:
    """Enforces a minimum delay between consecutive remote calls.

    The interval is fixed for the whole run. A rate-limit signal may stretch
    the next delay through ``back_off``, but never shortens it.
    """

    def __init__(self, interval_ms: float = 4000):
        """Initialize throttle gate.

        Args:
            interval_ms: Minimum delay in milliseconds, 0 disables waiting
        """
        if interval_ms < 0:
            raise ValueError('Throttle interval must be >= 0')

        self.interval = interval_ms / 1000.0
        self.waits = 0
        self.last_wait: Optional[float] = None
        self._penalty = 0.0

    def _next_delay(self) -> float:
        delay = max(self.interval, self._penalty)
        self._penalty = 0.0
        return delay

    async def wait(self) -> None:
        """Suspend the caller for at least the configured interval."""
        delay = self._next_delay()
        deadline = time.monotonic() + delay

        # asyncio.sleep may wake up slightly early on coarse clocks
        remaining = delay
        while remaining > 0:
            await asyncio.sleep(remaining)
            remaining = deadline - time.monotonic()

        self.last_wait = time.monotonic()
        self.waits += 1

    def back_off(self, seconds: float) -> None:
        """Stretch the next wait to at least ``seconds``.

        Args:
            seconds: Delay requested by the server (e.g. Retry-After)
        """
        self._penalty = max(self._penalty, float(seconds))

