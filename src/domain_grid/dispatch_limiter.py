"""
Dispatch limiter for domain checks.

Caps how many classification tasks may be talking to resolvers at the same
time. Tasks beyond the cap wait their turn; nothing is dropped or retried.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional


class DispatchLimiter:
    """
    Bounded admission for concurrent checks.

    A limit of 0 disables the cap entirely.
    """

    def __init__(self, max_concurrent: int = 100) -> None:
        """
        Initialize the limiter.

        Args:
            max_concurrent: Maximum checks in flight; 0 means unbounded
        """
        if max_concurrent < 0:
            raise ValueError(f"max_concurrent must not be negative: {max_concurrent}")

        self._max_concurrent = max_concurrent
        self._semaphore: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(max_concurrent) if max_concurrent > 0 else None
        )
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Highest number of simultaneously admitted checks seen so far."""
        return self._peak_in_flight

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        """
        Hold a dispatch slot for the duration of the block.

        Usage:
            async with limiter.acquire():
                outcome = await classifier.classify(domain)
        """
        if self._semaphore is not None:
            await self._semaphore.acquire()
        self._in_flight += 1
        self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._semaphore is not None:
                self._semaphore.release()
