"""Time-bounded polling of action code status."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

from action_codes_api import StatusSnapshot

logger = logging.getLogger("signing_flow.observer")

DEFAULT_INTERVAL_SECONDS = 2.0
DEFAULT_TIMEOUT_SECONDS = 120.0

StatusFetcher = Callable[[str], Awaitable[StatusSnapshot]]


@dataclass(frozen=True)
class StatusObservation:
    """One poll result, or the timed-out marker that ends a sequence."""

    elapsed: float
    snapshot: StatusSnapshot | None

    @property
    def timed_out(self) -> bool:
        return self.snapshot is None


class StatusObserver:
    """Polls a status source at a fixed interval until the consumer stops or time runs out.

    Each call to :meth:`observe` starts a fresh, non-restartable sequence. The first
    snapshot is fetched one interval after the start; once ``timeout`` has elapsed the
    sequence yields a single timed-out observation and ends, so it never outlives
    ``timeout + interval`` plus the latency of one fetch.
    """

    def __init__(
        self,
        fetch: StatusFetcher,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0 or timeout <= 0:
            msg = "interval and timeout must be positive"
            raise ValueError(msg)
        self._fetch = fetch
        self._interval = interval
        self._timeout = timeout
        self._sleep = sleep
        self._clock = clock

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def timeout(self) -> float:
        return self._timeout

    async def observe(self, code: str) -> AsyncIterator[StatusObservation]:
        """Yield status observations for ``code``."""
        started = self._clock()
        elapsed = 0.0
        while elapsed < self._timeout:
            await self._sleep(self._interval)
            snapshot = await self._fetch(code)
            elapsed = max(elapsed, self._clock() - started)
            logger.info("Status update for %s after %.1fs: %r", code, elapsed, snapshot)
            yield StatusObservation(elapsed=elapsed, snapshot=snapshot)
        logger.info("Status observation for %s timed out after %.1fs", code, elapsed)
        yield StatusObservation(elapsed=elapsed, snapshot=None)
