"""
Circuit Breaker pattern implementation for resilience.
Stops hammering an image host that keeps failing HEAD requests,
so a dead CDN does not add a timeout to every feed item.
"""
import logging
import time
from enum import Enum
from threading import Lock
from typing import Awaitable, Callable, Optional, TypeVar

from feed_syndication.core.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Blocking calls
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreaker:
    """
    Circuit breaker around awaitable calls.

    Usage:
        breaker = CircuitBreaker("content_length_lookup", failure_threshold=5)
        length = await breaker.call(lambda: client.head(url), fallback=lambda: None)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout_sec: float = 30,
    ) -> None:
        self._name = name
        self._failure_threshold = failure_threshold
        self._recovery_timeout_sec = recovery_timeout_sec

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time: Optional[float] = None
        self._lock = Lock()

    @property
    def state(self) -> CircuitState:
        """Current circuit state."""
        return self._state

    @property
    def name(self) -> str:
        """Circuit breaker name."""
        return self._name

    async def call(
        self,
        func: Callable[[], Awaitable[T]],
        fallback: Optional[Callable[[], T]] = None,
    ) -> T:
        """
        Await a coroutine factory through the circuit breaker.

        Args:
            func: Zero-argument callable returning an awaitable
            fallback: Optional synchronous fallback if the call fails or the circuit is open

        Returns:
            Result from func or fallback

        Raises:
            CircuitBreakerOpenError: If open and no fallback provided
        """
        with self._lock:
            if self._state == CircuitState.OPEN:
                if self._should_attempt_reset():
                    self._state = CircuitState.HALF_OPEN
                    logger.info(f"Circuit breaker '{self._name}' entering HALF_OPEN")
                elif fallback:
                    logger.debug(f"Circuit breaker '{self._name}' OPEN, using fallback")
                    return fallback()
                else:
                    raise CircuitBreakerOpenError(self._name)

        try:
            result = await func()
        except Exception as e:
            self._on_failure()
            if fallback:
                logger.warning(f"Circuit breaker '{self._name}' caught error, using fallback: {e}")
                return fallback()
            raise

        self._on_success()
        return result

    def _on_success(self) -> None:
        with self._lock:
            self._failure_count = 0
            if self._state == CircuitState.HALF_OPEN:
                self._state = CircuitState.CLOSED
                logger.info(f"Circuit breaker '{self._name}' recovered to CLOSED")

    def _on_failure(self) -> None:
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = time.monotonic()

            if self._state == CircuitState.HALF_OPEN or self._failure_count >= self._failure_threshold:
                self._state = CircuitState.OPEN
                logger.error(
                    f"Circuit breaker '{self._name}' OPENED after "
                    f"{self._failure_count} failures"
                )

    def _should_attempt_reset(self) -> bool:
        if self._last_failure_time is None:
            return True
        elapsed = time.monotonic() - self._last_failure_time
        return elapsed >= self._recovery_timeout_sec

    def reset(self) -> None:
        """Manually reset the circuit breaker."""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._failure_count = 0
            self._last_failure_time = None
            logger.info(f"Circuit breaker '{self._name}' manually reset")
