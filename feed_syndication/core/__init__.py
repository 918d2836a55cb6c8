"""Core infrastructure components."""
from .cache import TTLCache
from .circuit_breaker import CircuitBreaker, CircuitState
from .exceptions import (
    AppException,
    CircuitBreakerOpenError,
    NotFoundError,
    ServiceUnavailableError,
)

__all__ = [
    "AppException",
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    "NotFoundError",
    "ServiceUnavailableError",
    "TTLCache",
]
