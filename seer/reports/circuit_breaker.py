"""Circuit breaker for the summarizer's outbound LLM calls.

Usage:
    breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=300.0)
    try:
        text = await breaker.call(provider_call, prompt)
    except CircuitOpenError:
        # report is stored without AI fields
"""

import enum
import logging
import time
from typing import Any, Callable, Coroutine, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """Raised when calling through an open circuit breaker."""


class CircuitBreaker:
    """CLOSED → OPEN → HALF_OPEN → CLOSED state machine around an async call.

    - CLOSED: calls pass through; consecutive failures are counted.
    - OPEN: calls are rejected until ``recovery_timeout`` elapses.
    - HALF_OPEN: one probe call; success closes, failure reopens.
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_timeout: float = 300.0,
        name: str = "summarizer",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._name = name
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._opened_at: float = 0.0

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    async def call(
        self,
        fn: Callable[..., Coroutine[Any, Any, T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Execute ``fn`` through the breaker.

        Raises:
            CircuitOpenError: the circuit is open and still cooling down
        """
        if self._state == CircuitState.OPEN:
            if self._clock() - self._opened_at < self._recovery_timeout:
                raise CircuitOpenError(f"Circuit breaker {self._name} is OPEN")
            self._state = CircuitState.HALF_OPEN
            logger.info("Circuit breaker %s: OPEN → HALF_OPEN", self._name)

        try:
            result = await fn(*args, **kwargs)
        except BaseException:
            self._record_failure()
            raise

        if self._state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker %s: HALF_OPEN → CLOSED", self._name)
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        return result

    def _record_failure(self) -> None:
        self._consecutive_failures += 1

        if self._state == CircuitState.HALF_OPEN or self._consecutive_failures >= self._failure_threshold:
            if self._state != CircuitState.OPEN:
                logger.warning(
                    "Circuit breaker %s: %s → OPEN after %d failures",
                    self._name,
                    self._state.name,
                    self._consecutive_failures,
                )
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
