from __future__ import annotations
import asyncio, threading, time
from typing import Awaitable, Callable

from .config import DEFAULT_RATE


class RateLimiter:
    """
    Token bucket shared by every request of a client.

    - `rate` tokens per second, at most `burst` banked
    - `take()` reserves the next slot atomically, then sleeps until it is due
    - one instance can be handed to several clients to cap their aggregate rate
    """

    def __init__(
        self,
        rate: float = DEFAULT_RATE,
        burst: int = 1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")
        self.rate = float(rate)
        self.burst = int(burst)
        self.interval = 1.0 / self.rate
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._tat: float | None = None  # theoretical arrival time of the next token

    def reserve(self) -> float:
        """Claim a token and return how long the caller must wait for it."""
        with self._lock:
            now = self._clock()
            tat = now if self._tat is None else max(self._tat, now)
            allowed_at = tat - (self.burst - 1) * self.interval
            self._tat = tat + self.interval
            return max(0.0, allowed_at - now)

    async def take(self) -> float:
        wait = self.reserve()
        if wait > 0:
            await self._sleep(wait)
        return wait
