"""
Sysfs Agent - Periodic Trigger

Fires once after a warm-up delay and then on a fixed period. Time is measured
on the boot clock, which keeps counting through suspend and is unaffected by
wall-clock changes. Deadlines are fixed, so a slow cycle never shifts the
schedule.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

import structlog

from ..errors import TimerError

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


def boottime() -> float:
    """Seconds since boot, including time spent suspended."""
    return time.clock_gettime(time.CLOCK_BOOTTIME)


class PeriodicTrigger:
    """Boot-clock countdown driving the collection loop."""

    def __init__(
        self,
        warmup_delay: float,
        period: float,
        max_sleep: float = 60.0,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleeper] = None
    ):
        if period <= 0:
            raise ValueError("period must be positive")
        self.warmup_delay = warmup_delay
        self.period = period
        # Sleep in bounded chunks; asyncio.sleep does not count suspended time
        self.max_sleep = max_sleep
        self._clock = clock or boottime
        self._sleep = sleep or asyncio.sleep
        self._next_deadline: Optional[float] = None
        self.ticks = 0

    @property
    def is_armed(self) -> bool:
        return self._next_deadline is not None

    @property
    def next_deadline(self) -> Optional[float]:
        return self._next_deadline

    def _now(self) -> float:
        try:
            return self._clock()
        except (OSError, AttributeError) as e:
            raise TimerError(f"Boot clock unavailable: {e}") from e

    def arm(self) -> None:
        """Schedule the first tick warmup_delay seconds from now."""
        now = self._now()
        self._next_deadline = now + self.warmup_delay
        logger.info(
            "Periodic trigger armed",
            warmup_delay=self.warmup_delay,
            period=self.period
        )

    async def wait(self) -> int:
        """Block until the next tick is due.

        Returns the number of whole periods that were skipped because the
        caller (or the system) overran them; normally 0.
        """
        if self._next_deadline is None:
            raise TimerError("Trigger waited on before being armed")

        while True:
            now = self._now()
            remaining = self._next_deadline - now
            if remaining <= 0:
                break
            try:
                await self._sleep(min(remaining, self.max_sleep))
            except InterruptedError:
                logger.debug("Timer wait interrupted, retrying")

        missed = 0
        self._next_deadline += self.period
        while self._next_deadline <= now:
            self._next_deadline += self.period
            missed += 1

        if missed:
            logger.warning("Missed collection ticks", missed=missed)

        self.ticks += 1
        return missed
