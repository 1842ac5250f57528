"""Retry and circuit-breaker policies for outbound HTTP integrations.

Retry uses tenacity (exponential backoff, bounded attempts). The circuit
breaker is a small in-process state machine:

    CLOSED ──(threshold consecutive failures)──▶ OPEN
    OPEN ──(reset_timeout elapsed)──▶ HALF_OPEN (one probe allowed)
    HALF_OPEN ──success──▶ CLOSED / ──failure──▶ OPEN

State is per breaker instance; no cross-process coordination.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """Raised instead of calling the protected function while the circuit is open."""

    def __init__(self, name: str, retry_after: float) -> None:
        super().__init__(f"Circuit '{name}' open, retry in {retry_after:.0f}s")
        self.name = name
        self.retry_after = retry_after


class CircuitBreaker:
    """Consecutive-failure circuit breaker.

    Only exceptions listed in ``failure_exceptions`` count as failures;
    anything else passes through without touching the state.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 30.0,
        failure_exceptions: tuple[type[BaseException], ...] = (Exception,),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.failure_exceptions = failure_exceptions
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0

    @property
    def state(self) -> CircuitState:
        if self._state == CircuitState.OPEN and self._clock() - self._opened_at >= self.reset_timeout:
            return CircuitState.HALF_OPEN
        return self._state

    async def call(self, func: Callable[..., Awaitable[T]], *args: object, **kwargs: object) -> T:
        """Run ``func`` under the breaker."""
        state = self.state
        if state == CircuitState.OPEN:
            retry_after = self.reset_timeout - (self._clock() - self._opened_at)
            raise CircuitOpenError(self.name, retry_after)

        try:
            result = await func(*args, **kwargs)
        except self.failure_exceptions:
            self._record_failure(half_open=state == CircuitState.HALF_OPEN)
            raise

        self._record_success()
        return result

    def reset(self) -> None:
        self._state = CircuitState.CLOSED
        self._failures = 0

    def _record_success(self) -> None:
        if self._state != CircuitState.CLOSED:
            logger.info("Circuit %s closed after successful probe", self.name)
        self.reset()

    def _record_failure(self, half_open: bool) -> None:
        self._failures += 1
        if half_open or self._failures >= self.failure_threshold:
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
            logger.warning(
                "Circuit %s opened after %d consecutive failures",
                self.name,
                self._failures,
            )


def retrying(
    attempts: int,
    wait_multiplier: float,
    retry_on: tuple[type[BaseException], ...],
) -> AsyncRetrying:
    """Build a tenacity AsyncRetrying policy that re-raises the last error."""
    return AsyncRetrying(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=wait_multiplier, max=10),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
        before_sleep=lambda state: logger.warning(
            "Retrying after %s (attempt %d)",
            type(state.outcome.exception()).__name__ if state.outcome else "error",
            state.attempt_number,
        ),
    )
