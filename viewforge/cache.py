"""In-memory cache for resolved templates."""

import threading
from collections.abc import Callable, Hashable
from typing import Any, TypeVar

from viewforge.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

T = TypeVar("T")


class TemplateCache:
    """Process-lifetime cache of template resolutions.

    Thread-safe for concurrent renders using threading.Lock. Resolution is
    deterministic, so two threads racing on the same key simply store equal
    values and the last write wins.
    """

    def __init__(self):
        self._cache: dict[Hashable, Any] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Any | None:
        """Get cached value.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        with self._lock:
            value = self._cache.get(key)
            if value is not None:
                self.hits += 1
                log_with_context(
                    logger,
                    "debug",
                    "Template cache hit",
                    cache_key=repr(key),
                    event_type="template_cache_hit",
                )
            else:
                self.misses += 1
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Set cached value.

        Args:
            key: Cache key
            value: Value to cache
        """
        with self._lock:
            self._cache[key] = value
            log_with_context(
                logger,
                "debug",
                "Template cache set",
                cache_key=repr(key),
                event_type="template_cache_set",
            )

    def clear(self, key: Hashable | None = None) -> None:
        """Clear cache entry or entire cache.

        Args:
            key: Specific key to clear, or None to clear all
        """
        with self._lock:
            if key is not None:
                self._cache.pop(key, None)
            else:
                self._cache.clear()
                log_with_context(
                    logger,
                    "info",
                    "Template cache cleared",
                    event_type="template_cache_clear_all",
                )

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._cache


def cached(cache: TemplateCache, key: Hashable, fetch_func: Callable[[], T]) -> T:
    """Return the cached value for key, computing and storing it on a miss.

    The fetch runs outside the lock; failures are not cached.

    Args:
        cache: Cache instance
        key: Cache key
        fetch_func: Function to call on cache miss

    Returns:
        Cached or freshly computed value
    """
    cached_value: T | None = cache.get(key)
    if cached_value is not None:
        return cached_value

    value: T = fetch_func()
    cache.set(key, value)
    return value
