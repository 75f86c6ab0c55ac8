"""updatable-tree - Incrementally refreshed tree caches.

updatable-tree keeps a tree of lazily loaded nodes in sync with a remote
source (issue trackers, pull request searches) without losing node identity
between refreshes, so a UI mirroring the tree re-renders only what changed.

    from updatabletree.aio import UpdatableTreeRoot, QueryNode
"""

__version__ = "0.1.0"

from . import aio
from . import config

__all__ = [
    "__version__",
    "aio",
    "config",
]
