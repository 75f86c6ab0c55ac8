"""Core abstractions for updatable trees.

This module defines the node and root interfaces and the identity diff
that keeps node objects stable across refreshes.
"""

from .diff import reconcile_children
from .events import ChangeEmitter
from .node import UpdatableNode
from .root import UpdatableTreeRoot, CallbackTreeRoot

__all__ = [
    # Diff
    'reconcile_children',
    # Notifications
    'ChangeEmitter',
    # Node
    'UpdatableNode',
    # Roots
    'UpdatableTreeRoot',
    'CallbackTreeRoot',
]
