"""
In-memory TTL cache.
Holds content-length results for hero images between feed requests.
"""
import time
from threading import Lock
from typing import Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Thread-safe key/value store whose entries expire after a fixed TTL.

    Usage:
        cache: TTLCache[str] = TTLCache(ttl_seconds=3600)
        cache.set(url, "48213")
        length = cache.get(url)
    """

    def __init__(self, ttl_seconds: Optional[float] = None, max_entries: int = 1024) -> None:
        self._store: Dict[str, Tuple[T, Optional[float]]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = Lock()

    def get(self, key: str) -> Optional[T]:
        """Get value by key, returns None if not found or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and time.monotonic() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: T) -> None:
        """Store a value; evicts the oldest entry when full."""
        expires_at = time.monotonic() + self._ttl if self._ttl else None
        with self._lock:
            if key not in self._store and len(self._store) >= self._max_entries:
                oldest = next(iter(self._store))
                del self._store[oldest]
            self._store[key] = (value, expires_at)

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
