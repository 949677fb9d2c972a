"""
Sliding-window rate limiters for request throughput control.

Capital.com limits:
- 10 requests per second per user across the REST API.
- 1 request per second for POST /api/v1/session.

Exceeding them gets a 429, so the clients pace themselves instead.
"""

from __future__ import annotations

from collections import deque
import asyncio
import time


class _Window:
    """
    Shared bookkeeping: timestamps of calls inside the current window.
    """

    def __init__(self, max_calls: int, period_seconds: float = 1.0) -> None:
        if max_calls <= 0:
            raise ValueError("max_calls must be > 0")
        if period_seconds <= 0:
            raise ValueError("period_seconds must be > 0")
        self._max = max_calls
        self._period = period_seconds
        self._timestamps: deque[float] = deque()

    def _delay(self, now: float) -> float:
        window_start = now - self._period
        while self._timestamps and self._timestamps[0] <= window_start:
            self._timestamps.popleft()
        if len(self._timestamps) < self._max:
            return 0.0
        return self._period - (now - self._timestamps[0])


class RateLimiter(_Window):
    """
    Blocking limiter for the requests-based client.
    """

    def wait(self) -> None:
        sleep_for = self._delay(time.perf_counter())
        if sleep_for > 0:
            time.sleep(sleep_for)
        self._timestamps.append(time.perf_counter())


class AsyncRateLimiter(_Window):
    """
    Coroutine limiter for the aiohttp-based client.
    """

    def __init__(self, max_calls: int, period_seconds: float = 1.0) -> None:
        super().__init__(max_calls, period_seconds)
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            sleep_for = self._delay(time.perf_counter())
            if sleep_for > 0:
                await asyncio.sleep(sleep_for)
            self._timestamps.append(time.perf_counter())


def session_limiter() -> RateLimiter:
    return RateLimiter(1, 1.0)


def async_session_limiter() -> AsyncRateLimiter:
    return AsyncRateLimiter(1, 1.0)
