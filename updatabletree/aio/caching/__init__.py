"""
Caching utilities for updatable-tree.

Provides a shared, deduplicating response cache that concrete nodes can
put in front of their remote fetch functions.
"""

from .fetcher import CachingFetcher

__all__ = [
    'CachingFetcher',
]
