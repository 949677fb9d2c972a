import asyncio
import time

import pytest

from capital_client.rate_limit import (
    AsyncRateLimiter,
    RateLimiter,
    async_session_limiter,
    session_limiter,
)


def test_rate_limiter_rejects_invalid_max() -> None:
    with pytest.raises(ValueError):
        RateLimiter(0)
    with pytest.raises(ValueError):
        AsyncRateLimiter(0)
    with pytest.raises(ValueError):
        RateLimiter(1, 0)


def test_rate_limiter_wait_delays(monkeypatch: pytest.MonkeyPatch) -> None:
    limiter = RateLimiter(1)
    times = [1000.0, 1000.0, 1000.1, 1001.2]
    monkeypatch.setattr(time, "perf_counter", lambda: times.pop(0))
    called = []
    monkeypatch.setattr(time, "sleep", lambda s: called.append(s))
    limiter.wait()
    limiter.wait()
    assert called, "Expected sleep to be called for rate limiting"
    assert called[0] == pytest.approx(0.9)


def test_rate_limiter_allows_burst_within_window(monkeypatch: pytest.MonkeyPatch) -> None:
    limiter = RateLimiter(10)
    monkeypatch.setattr(time, "perf_counter", lambda: 500.0)
    called = []
    monkeypatch.setattr(time, "sleep", lambda s: called.append(s))
    for _ in range(10):
        limiter.wait()
    assert called == []


def test_session_limiter_is_one_per_second(monkeypatch: pytest.MonkeyPatch) -> None:
    limiter = session_limiter()
    times = [10.0, 10.0, 10.5, 11.0]
    monkeypatch.setattr(time, "perf_counter", lambda: times.pop(0))
    called = []
    monkeypatch.setattr(time, "sleep", lambda s: called.append(s))
    limiter.wait()
    limiter.wait()
    assert called == [pytest.approx(0.5)]


@pytest.mark.asyncio
async def test_async_rate_limiter_wait_delays(monkeypatch: pytest.MonkeyPatch) -> None:
    limiter = async_session_limiter()
    times = [20.0, 20.0, 20.25, 21.0]
    monkeypatch.setattr(time, "perf_counter", lambda: times.pop(0))
    called = []

    async def fake_sleep(seconds: float) -> None:
        called.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    await limiter.wait()
    await limiter.wait()
    assert called == [pytest.approx(0.75)]
