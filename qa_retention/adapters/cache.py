"""Short-lived read cache for tracker listings.

Created per run and handed to the issue source. Entries expire a fixed
time after they are stored, whether or not they are read again.
"""

import threading
import time
from typing import Any, Callable, Dict, Hashable, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0


class TimedCache:
    """In-memory cache with unconditional expiry."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def get_or_load(self, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value or call loader and store its result.

        Loader errors propagate and nothing is stored.
        """
        value = self.get(key)
        if value is not None:
            return value
        value = loader()
        self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)
