"""
Shared response cache for remote fetches.

Nodes in different subtrees often ask for the same remote resource during
one refresh burst (the same pull request listed under "My PRs" and under a
label filter). Wrapping the fetch function in a CachingFetcher makes them
share a single request.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable

from cachetools import TTLCache


logger = logging.getLogger(__name__)


class CachingFetcher:
    """
    Keyed async fetch function with in-flight deduplication and a TTL cache.

    Uses Future-based coordination to prevent duplicate concurrent requests
    for the same key. Failed requests are not cached.

    Example:
        fetch_pr = CachingFetcher(get_json, ttl=30.0)
        details = await fetch_pr(pr_url, context)
    """

    def __init__(
        self,
        fetch: Callable[[Hashable, Any], Awaitable[Any]],
        max_size: int = 1000,
        ttl: float = 30.0,
    ):
        """
        Initialize caching fetcher.

        Args:
            fetch: Async function taking (key, context)
            max_size: Maximum number of cached responses
            ttl: Time-to-live for cached responses in seconds
        """
        self._fetch = fetch
        self._cache = TTLCache(maxsize=max_size, ttl=ttl)
        self._in_progress: Dict[Hashable, asyncio.Future] = {}

        # Statistics
        self.cache_hits = 0
        self.cache_misses = 0
        self.concurrent_waits = 0

    async def __call__(self, key: Hashable, context: Any = None) -> Any:
        """
        Fetch the resource for key, sharing work with concurrent callers.

        1. Joins a request already in progress for the key
        2. Serves a cached response if one is still fresh
        3. Otherwise performs the request and shares its result
        """
        if key in self._in_progress:
            self.concurrent_waits += 1
            return await asyncio.shield(self._in_progress[key])

        if key in self._cache:
            self.cache_hits += 1
            return self._cache[key]

        self.cache_misses += 1
        future = asyncio.get_running_loop().create_future()
        self._in_progress[key] = future

        try:
            result = await self._fetch(key, context)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as error:
            logger.debug("Fetch of %r failed, not caching: %s", key, error)
            future.set_exception(error)
            # Mark retrieved in case nobody else was waiting
            future.exception()
            raise
        else:
            self._cache[key] = result
            future.set_result(result)
            return result
        finally:
            del self._in_progress[key]

    def invalidate(self, key: Hashable) -> None:
        """Drop the cached response for key, if any."""
        self._cache.pop(key, None)

    def get_cache_stats(self) -> dict:
        """
        Get cache statistics for monitoring and debugging.
        """
        total_requests = self.cache_hits + self.cache_misses
        hit_rate = self.cache_hits / total_requests if total_requests > 0 else 0

        return {
            'cache_hits': self.cache_hits,
            'cache_misses': self.cache_misses,
            'hit_rate': hit_rate,
            'concurrent_waits': self.concurrent_waits,
            'cache_size': len(self._cache),
            'max_size': self._cache.maxsize,
            'ttl': self._cache.ttl,
        }

    def clear_cache(self) -> None:
        """
        Clear all cached responses and statistics.
        """
        self._cache.clear()
        self.cache_hits = 0
        self.cache_misses = 0
        self.concurrent_waits = 0
