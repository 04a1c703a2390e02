# storefront/homepage/cache.py
"""
Time-boxed response cache shared by every resolver of one composition run.

Built once per page session and passed to the client explicitly. Identical
requests already in flight are not coalesced: two misses for the same key
both go to the network and the later write wins.
"""
import time
from typing import Any, Callable, Dict, Optional, Tuple

DEFAULT_TTL = 300


class ResponseCache:
    def __init__(self, ttl: int = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}  # key -> (value, expires_at)

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None

        return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = self.ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + ttl)

    def clear_matching(self, fragment: str) -> int:
        """Drop every entry whose key contains ``fragment``. Returns the count."""
        doomed = [key for key in self._entries if fragment in key]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
