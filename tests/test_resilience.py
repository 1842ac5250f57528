"""Tests for the circuit breaker and the tenacity retry policy."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.integrations.resilience import CircuitBreaker, CircuitOpenError, CircuitState, retrying


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _breaker(clock: FakeClock, threshold: int = 2) -> CircuitBreaker:
    return CircuitBreaker(
        "test",
        failure_threshold=threshold,
        reset_timeout=30,
        failure_exceptions=(ConnectionError,),
        clock=clock,
    )


class TestCircuitBreaker:
    @pytest.mark.asyncio()
    async def test_success_keeps_closed(self):
        breaker = _breaker(FakeClock())
        func = AsyncMock(return_value="ok")

        assert await breaker.call(func, "a") == "ok"
        func.assert_awaited_once_with("a")
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio()
    async def test_opens_after_threshold(self):
        breaker = _breaker(FakeClock())
        func = AsyncMock(side_effect=ConnectionError)

        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(func)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(CircuitOpenError):
            await breaker.call(func)
        assert func.await_count == 2

    @pytest.mark.asyncio()
    async def test_success_resets_failure_count(self):
        breaker = _breaker(FakeClock())
        failing = AsyncMock(side_effect=ConnectionError)
        ok = AsyncMock(return_value=1)

        with pytest.raises(ConnectionError):
            await breaker.call(failing)
        await breaker.call(ok)
        with pytest.raises(ConnectionError):
            await breaker.call(failing)

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio()
    async def test_unlisted_exceptions_do_not_count(self):
        breaker = _breaker(FakeClock(), threshold=1)
        func = AsyncMock(side_effect=ValueError)

        with pytest.raises(ValueError):
            await breaker.call(func)

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio()
    async def test_half_open_probe_success_closes(self):
        clock = FakeClock()
        breaker = _breaker(clock, threshold=1)
        with pytest.raises(ConnectionError):
            await breaker.call(AsyncMock(side_effect=ConnectionError))

        clock.now = 30
        assert breaker.state == CircuitState.HALF_OPEN
        await breaker.call(AsyncMock(return_value=None))

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio()
    async def test_half_open_probe_failure_reopens(self):
        clock = FakeClock()
        breaker = _breaker(clock, threshold=3)
        failing = AsyncMock(side_effect=ConnectionError)
        for _ in range(3):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)

        clock.now = 31
        with pytest.raises(ConnectionError):
            await breaker.call(failing)

        assert breaker.state == CircuitState.OPEN
        with pytest.raises(CircuitOpenError) as exc_info:
            await breaker.call(failing)
        assert exc_info.value.retry_after == pytest.approx(30)


class TestRetrying:
    @pytest.mark.asyncio()
    async def test_retries_listed_errors_then_reraises(self):
        func = AsyncMock(side_effect=ConnectionError("boom"))

        with pytest.raises(ConnectionError):
            async for attempt in retrying(3, 0, (ConnectionError,)):
                with attempt:
                    await func()

        assert func.await_count == 3

    @pytest.mark.asyncio()
    async def test_does_not_retry_other_errors(self):
        func = AsyncMock(side_effect=ValueError("bad"))

        with pytest.raises(ValueError):
            async for attempt in retrying(3, 0, (ConnectionError,)):
                with attempt:
                    await func()

        assert func.await_count == 1
