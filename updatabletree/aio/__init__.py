"""Asynchronous implementation of updatable-tree.

All nodes refresh as tasks on the running asyncio event loop. Nothing here
is thread-safe; use one loop per tree.
"""

# Core abstractions
from .core import (
    UpdatableNode,
    UpdatableTreeRoot,
    CallbackTreeRoot,
    ChangeEmitter,
    reconcile_children,
)

# Concrete nodes
from .adapters import (
    LeafNode,
    StaticNode,
    QueryNode,
)

# Caching
from .caching import CachingFetcher

# Errors
from .errors import FetchError, FetchTimeoutError
from .error_policies import (
    ErrorPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
)

# Configuration
from ..config import (
    RefreshConfig,
    SourceSettings,
    FetchContext,
    DEFAULT_TIMEOUT_MS,
)

__all__ = [
    # Core abstractions
    'UpdatableNode',
    'UpdatableTreeRoot',
    'CallbackTreeRoot',
    'ChangeEmitter',
    'reconcile_children',
    # Nodes
    'LeafNode',
    'StaticNode',
    'QueryNode',
    # Caching
    'CachingFetcher',
    # Errors
    'FetchError',
    'FetchTimeoutError',
    'ErrorPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    # Configuration
    'RefreshConfig',
    'SourceSettings',
    'FetchContext',
    'DEFAULT_TIMEOUT_MS',
]
