# This project was developed with assistance from AI tools.
"""Fixed-capacity LRU cache with per-entry TTL.

Side-cache for read paths only (listing terms). It is never the system
of record and is never consulted by write paths to decide a transition.
Expired entries are dropped on access and by a periodic sweep that runs
lazily on writes.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from ..core.config import settings

logger = logging.getLogger(__name__)

_MISSING = object()


class ReadCache:
    """LRU + TTL key/value cache."""

    def __init__(
        self,
        *,
        max_entries: int = 100,
        ttl_seconds: float = 300,
        sweep_interval: float = 60,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self.sweep_interval = sweep_interval
        self.enabled = enabled
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._last_sweep = clock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable, default: Any = None) -> Any:
        if not self.enabled:
            return default
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return default
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            self.misses += 1
            return default
        self._entries.move_to_end(key)
        self.hits += 1
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if not self.enabled:
            return
        now = self._clock()
        if now - self._last_sweep >= self.sweep_interval:
            self.sweep()
        self._entries[key] = (now + self.ttl_seconds, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Read cache evicted %r", evicted)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        return len(expired)

    async def get_or_load(self, key: Hashable, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value or await ``loader`` and cache a non-None result."""
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value
        value = await loader()
        if value is not None:
            self.set(key, value)
        return value


listing_cache = ReadCache(
    max_entries=settings.READ_CACHE_MAX_ENTRIES,
    ttl_seconds=settings.READ_CACHE_TTL_SECONDS,
    enabled=settings.READ_CACHE_ENABLED,
)
